"""Phasing of diploid genotypes from the genotypes of guiding samples."""

from __future__ import annotations

import math
from pathlib import Path
from typing import NamedTuple, Optional, Sequence

from pollo.distances import CrossCmpTri, Dists, accumulate
from pollo.guiders import PLOIDY, Guider
from pollo.triangular import TriangularMatrix
from pollo.vcf import (
    Allele,
    OutputType,
    VcfHeader,
    VcfRecord,
    VcfWriter,
    format_genotype,
    read_vcf,
)

MAX_QUALITY = 100


class PhasedCall(NamedTuple):
    """Alleles of one sample, whether they are phased, and the phasing quality."""

    alleles: list[Allele]
    phased: bool
    score: int


def _allele_order(allele: Allele) -> tuple[bool, int]:
    return (allele is not None, allele if allele is not None else 0)


def to_genotype(alleles: Sequence[Allele], phased: bool) -> str:
    """GT text of the alleles; unphased alleles are sorted, missing first."""
    if not alleles:
        raise ValueError("a genotype needs at least one allele")
    ordered = list(alleles) if phased else sorted(alleles, key=_allele_order)
    return format_genotype(ordered, phased)


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _phred(fraction: float) -> int:
    remainder = 1.0 - fraction
    if math.isnan(remainder) or remainder <= 0.0:
        return MAX_QUALITY
    score = _round_half_away(-10.0 * math.log10(remainder))
    return int(min(score, MAX_QUALITY))


def phase_sample(genotypes: Sequence[Sequence[Allele]], index: int,
                 sample_guider: Guider) -> PhasedCall:
    """Phase sample `index` using the weighted guiders of its two haplotypes."""
    current = list(genotypes[index])
    if all(a == current[0] for a in current[1:]):
        if current[0] is None:
            return PhasedCall(current, False, 0)
        return PhasedCall(current, True, MAX_QUALITY)

    evidence = [0.0, 0.0]
    for t, guider in enumerate(sample_guider):
        for cmp_idx, weight in guider:
            other = genotypes[cmp_idx]
            for u, allele in enumerate(current):
                if allele is not None and allele in other:
                    evidence[0 if t == u else 1] += weight

    same, swapped = evidence
    if same == swapped:
        return PhasedCall(current, False, 0)
    if same > swapped:
        return PhasedCall(current, True, _phred(same / (same + swapped)))
    return PhasedCall(current[::-1], True, _phred(swapped / (same + swapped)))


def phase_record(genotypes: Sequence[Sequence[Allele]],
                 chr_guider: Sequence[Guider]) -> tuple[list[PhasedCall], Dists]:
    """Phased calls of every sample and the haplotype distances they imply."""
    for gt in genotypes:
        if len(gt) != PLOIDY:
            raise ValueError("found genotype of unsupported ploidy in input file")

    calls = [phase_sample(genotypes, i, chr_guider[i]) for i in range(len(genotypes))]

    haplotypes: list[int] = []
    missing: list[bool] = []
    for call in calls:
        if call.phased:
            haplotypes += [0 if a is None else a for a in call.alleles]
            missing += [a is None for a in call.alleles]
        else:
            haplotypes += [0] * PLOIDY
            missing += [True] * PLOIDY

    size = len(genotypes) * PLOIDY
    cct = CrossCmpTri(size)
    ht_i, ht_j = cct.get_ij_arrs(haplotypes, 1)
    ms_i, ms_j = cct.get_ij_arrs(missing, 1)
    compared = [not a and not b for a, b in zip(ms_i, ms_j)]
    distances = [int(c and a != b) for a, b, c in zip(ht_i, ht_j, compared)]
    comparisons = [int(c) for c in compared]
    return calls, Dists(TriangularMatrix(size, distances), TriangularMatrix(size, comparisons))


def write_phased(input_file: str | Path, output_file: Optional[str | Path],
                 output_type: OutputType,
                 guiders: Sequence[Optional[Sequence[Guider]]]) -> list[Optional[Dists]]:
    """Write the phased VCF and return per-contig haplotype distances."""
    header, records = read_vcf(input_file)
    nsamples = len(header.samples)
    out_header = VcfHeader(meta=list(header.meta), samples=list(header.samples))
    out_header.add_format("PQ", 1, "Integer", "Phasing quality")

    per_contig: list[Optional[Dists]] = [None] * len(guiders)
    with VcfWriter(output_file, out_header, output_type) as writer:
        for record in records:
            rid = record.rid
            if rid is None or rid >= len(guiders) or guiders[rid] is None:
                continue
            calls, dists = phase_record(record.genotypes()[:nsamples], guiders[rid])
            writer.write(VcfRecord(
                chrom=record.chrom,
                pos=record.pos,
                rid=rid,
                ident=record.ident,
                alleles=list(record.alleles),
                qual=record.qual,
                filters=list(record.filters),
                format=["GT", "PQ"],
                samples=[[to_genotype(c.alleles, c.phased), str(c.score)] for c in calls],
            ))
            accumulate(per_contig, rid, dists)
    return per_contig