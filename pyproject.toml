[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "lispet"
version = "0.1.0"
description = "A small tree-walking interpreter for a Lisp-like language with special forms, lambdas and layered scopes"
requires-python = ">=3.10"
dependencies = []
keywords = ["lisp", "interpreter", "s-expression", "special forms", "language"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["lispet*"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
