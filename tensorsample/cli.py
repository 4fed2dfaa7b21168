import argparse
import json
import sys
import shutil
from pathlib import Path
import questionary

from . import config as cfg

custom_style_fancy = questionary.Style([
    ("highlighted", "fg:#00ff88 bold"),
])

banner = r"""
 _                                                      _
| |_ ___ _ __  ___  ___  _ __ ___  __ _ _ __ ___  _ __ | | ___
| __/ _ \ '_ \/ __|/ _ \| '__/ __|/ _` | '_ ` _ \| '_ \| |/ _ \
| ||  __/ | | \__ \ (_) | |  \__ \ (_| | | | | | | |_) | |  __/
 \__\___|_| |_|___/\___/|_|  |___/\__,_|_| |_| |_| .__/|_|\___|
                                                 |_|
"""

terminal_width = shutil.get_terminal_size().columns

def print_config(config, title="Configuration:"):
    print("\n" + "-" * terminal_width)
    print(title)
    print("-" * terminal_width)
    for key, value in config.items():
        print(f"  {key}: {value}")
    print("-" * terminal_width)

def _read_probs(args):
    if args.probs_file is not None:
        with open(args.probs_file, "r") as f:
            return json.load(f)
    return json.loads(args.probs)

def sample(argv=None):
    """Handle sample subcommand."""
    from .sampling import multinomial, empirical_probs
    from .errors import SamplingError
    from .tensor import Tensor

    parser = argparse.ArgumentParser(prog="tensorsample sample")
    probs_group = parser.add_mutually_exclusive_group(required=True)
    probs_group.add_argument("--probs", type=str, help="JSON list (one distribution) or list of lists (batch)")
    probs_group.add_argument("--probs_file", type=str, help="Path to a JSON file holding the probabilities")
    parser.add_argument("-n", "--num_samples", type=int, required=True)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--normalized", action="store_true", help="Probabilities already sum to 1")
    parser.add_argument("--num_workers", type=int, default=None)
    parser.add_argument("--summary", action="store_true", help="Print outcome frequencies instead of samples")
    parser.add_argument("--config", type=str, default=None, help="Path to config file")
    args = parser.parse_args(argv)

    try:
        config = cfg.load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    cfg.apply_config(config)

    try:
        probs = Tensor(_read_probs(args), device=cfg.DEVICE, dtype="float64")
    except (OSError, ValueError) as e:
        print(f"Error: could not read probabilities: {e}")
        sys.exit(1)

    try:
        samples = multinomial(probs,
                              args.num_samples,
                              seed=args.seed,
                              normalized=args.normalized,
                              num_workers=args.num_workers)
    except SamplingError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.summary:
        freqs = empirical_probs(samples, probs.shape[-1])
        print(json.dumps(freqs.tolist()))
    else:
        print(json.dumps(samples.tolist()))

def test():
    """Handle test subcommand."""
    import pytest

    tests_dir = Path(__file__).parent / "tests"

    print("=" * terminal_width)
    print("Running tensorsample Tests")
    print("=" * terminal_width)

    exit_code = pytest.main([str(tests_dir), "-q"])

    print("\n" + "=" * terminal_width)
    if exit_code == 0:
        print("✓ ALL TESTS PASSED")
    else:
        print(f"✗ TESTS FAILED (pytest exit code {int(exit_code)})")
    print("=" * terminal_width)
    sys.exit(int(exit_code))

def env():
    config = cfg.load_config()
    if not cfg.get_config_path().exists():
        print("No config file found, showing built-in defaults. Run `tensorsample config` to create one.")
    print_config(config, title="Sampling Configuration:")

def interactive_config():
    """Run interactive configuration setup."""
    print(banner)
    print("-" * terminal_width)

    config = {}

    device = questionary.select(
        "Where should the CLI place probability tensors?",
        choices=[
            "cpu",
            "cuda:0"
        ],
        style=custom_style_fancy
    ).ask()

    num_workers = questionary.text(
        "How many worker threads should sample rows of a batch?",
        instruction="(Press Enter for default: 0, sample on the calling thread)",
        validate=lambda text: True if text == "" or text.isdigit() else "Must be a non-negative integer"
    ).ask()

    warn_unnormalized = questionary.select(
        "Warn when rows passed with normalized=True do not sum to 1?",
        choices=[
            "Yes",
            "No"
        ],
        style=custom_style_fancy
    ).ask()

    if device is None or num_workers is None or warn_unnormalized is None:
        print("\nConfiguration not saved.")
        return False

    config["device"] = device
    config["num_workers"] = int(num_workers) if len(num_workers) > 0 else cfg.DEFAULT_CONFIG_ENV["num_workers"]
    config["warn_unnormalized"] = "True" if warn_unnormalized == "Yes" else "False"
    config["normalized_atol"] = cfg.DEFAULT_CONFIG_ENV["normalized_atol"]

    print_config(config, title="Configuration Summary:")

    confirm = questionary.confirm(
        "Save this configuration?",
        default=True
    ).ask()

    if confirm is None or not confirm:
        print("\nConfiguration not saved.")
        return False

    if cfg.save_config(config):
        print("\nConfiguration complete!")
        print(f"  You can edit {cfg.get_config_path()} manually or run 'tensorsample config' again.")
        return True
    return False

def main():

    parser = argparse.ArgumentParser(
        prog="tensorsample"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('sample',
                          help='Draw samples from categorical distributions',
                          add_help=False)
    subparsers.add_parser('test',
                          help='Run tests')
    subparsers.add_parser('config',
                          help='Create a config file interactively')
    subparsers.add_parser("env",
                          help="See current config")

    args, remaining = parser.parse_known_args()

    if args.command == "sample":
        sample(remaining)

    elif args.command == "config":
        interactive_config()

    elif args.command == "test":
        test()

    elif args.command == "env":
        env()

    else:
        parser.print_help()

if __name__ == "__main__":
    main()
