[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hdkeychain"
version = "0.1.0"
description = "Hierarchical deterministic keys (BIP32, BIP49, BIP84) on secp256k1"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = [
    "bip32",
    "bip49",
    "bip84",
    "hd-wallet",
    "secp256k1",
    "ecdsa",
    "xpub",
    "xpriv",
    "base58",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hdkeychain"]

[tool.hatch.build.targets.sdist]
include = [
    "hdkeychain",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true
