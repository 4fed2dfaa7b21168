import os
import yaml
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(os.path.join(Path.home(), ".cache", "tensorsample", "default_config.yaml"))

DEFAULT_CONFIG_ENV = {
    "num_workers": 0,
    "warn_unnormalized": "True",
    "normalized_atol": 1e-3,
    "device": "cpu",
}

### Config keys and the environment variable each one is exported to ###
ENV_VARS = {
    "num_workers": "TENSORSAMPLE_NUM_WORKERS",
    "warn_unnormalized": "TENSORSAMPLE_WARN_UNNORMALIZED",
    "normalized_atol": "TENSORSAMPLE_NORMALIZED_ATOL",
    "device": "TENSORSAMPLE_DEVICE",
}

def _env(key):
    return os.getenv(ENV_VARS[key], str(DEFAULT_CONFIG_ENV[key]))

### FLAG FOR ROW WORKERS ###
### Rows of a batch are independent, so we can sample them on a pool of threads. ###
### 0 means everything runs on the calling thread. The seed gives every row its own ###
### stream so the result is the same no matter how many workers we use! ###
NUM_WORKERS = int(_env("num_workers"))

### FLAG FOR CHECKING `normalized=True` ROWS ###
### We always renormalize, but if a caller says a row sums to 1 and it doesnt ###
### (by more than NORMALIZED_ATOL) we let them know with a warning ###
WARN_UNNORMALIZED = _env("warn_unnormalized").lower() == "true"
NORMALIZED_ATOL = float(_env("normalized_atol"))

### Device for tensors built by the CLI ###
DEVICE = _env("device")

def get_config_path():
    return DEFAULT_CONFIG_PATH

def save_config(config, config_path=None):
    """Save configuration to YAML file."""
    config_path = Path(config_path) if config_path is not None else get_config_path()

    # Create directory if it doesn't exist
    config_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(config_path, 'w') as f:
            yaml.dump(config, f, default_flow_style=False)
        print(f"\nConfiguration saved to {config_path}")
        return True
    except OSError as e:
        print(f"Error: Failed to save config to {config_path}: {e}")
        return False

def load_config(config_path=None):
    """
    Load YAML config, missing keys fall back to DEFAULT_CONFIG_ENV.
    A custom path that doesnt exist is an error, a missing default is not.
    """
    if config_path is None:
        config_path = get_config_path()
        using_default = True
    else:
        config_path = Path(config_path)
        using_default = False

    config = DEFAULT_CONFIG_ENV.copy()

    if not config_path.exists():
        if not using_default:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config

    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Warning: Failed to load config from {config_path}: {e}")
        return config

    if loaded:
        config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG_ENV})
    return config

def apply_config(config):
    """
    Push config values into the environment (so child processes see them)
    and refresh the flags of this already imported module.
    """
    global NUM_WORKERS, WARN_UNNORMALIZED, NORMALIZED_ATOL, DEVICE

    for key, env_var in ENV_VARS.items():
        if key in config:
            os.environ[env_var] = str(config[key])

    NUM_WORKERS = int(_env("num_workers"))
    WARN_UNNORMALIZED = _env("warn_unnormalized").lower() == "true"
    NORMALIZED_ATOL = float(_env("normalized_atol"))
    DEVICE = _env("device")
