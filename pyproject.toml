[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mmlinfer"
version = "0.1.0"
description = "Tensors, GEMM kernels, element-wise operations and ONNX-style Add, Constant, Dropout and Conv nodes."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["tensor", "gemm", "onnx", "inference", "convolution", "neural-network"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mmlinfer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
