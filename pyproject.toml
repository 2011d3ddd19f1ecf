[build-system]
requires = ["setuptools>=68"]
build-backend = "setuptools.build_meta"

[project]
name = "cipherlab"
version = "0.1.0"
description = "Block-cipher cryptanalysis toolkit: traced AES-128, a biclique key-recovery attack on its last rounds, and a 16-bit toy cipher with differential statistics"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "aes",
    "biclique",
    "cryptanalysis",
    "differential cryptanalysis",
    "linear cryptanalysis",
    "s-box",
    "toy cipher",
    "education",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cipherlab-biclique = "cipherlab.biclique_demo:main"
cipherlab-toycipher = "cipherlab.toycipher_cli:main"
cipherlab-verify = "cipherlab.verify:main"

[tool.setuptools.packages.find]
include = ["cipherlab*"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
