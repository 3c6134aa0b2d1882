[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pollo"
version = "0.1.0"
description = "Population-guided genotype phasing for diploid VCF files"
requires-python = ">=3.10"
dependencies = []
keywords = ["vcf", "phasing", "genotype", "haplotype", "bioinformatics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pollo = "pollo.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pollo"]

[tool.pytest.ini_options]
addopts = "-ra"
