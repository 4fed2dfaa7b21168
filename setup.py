from setuptools import setup, find_packages

# Base dependencies for tensorsample
INSTALL_REQUIRES = [
    "numpy",
    "pyyaml",
    "questionary",
]

# Optional dependencies for tensorsample[cuda] and tensorsample[test]
EXTRAS_REQUIRE = {
    "cuda": [
        "cupy-cuda12x",
    ],
    "test": [
        "pytest",
    ],
}

setup(
    name="tensorsample",
    version="0.1.0",
    author="Priyam Mazumdar",
    description="Categorical sampling for NumPy/CuPy tensors, batched and reproducible",
    packages=find_packages(),
    python_requires=">=3.10,<3.14",
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    package_data={"tensorsample": ["tests/*.py"]},
    entry_points={
        "console_scripts": [
            "tensorsample=tensorsample.cli:main",
        ],
    },
)
