"""Population-guided phasing of diploid genotypes in VCF files."""

__version__ = "0.1.0"