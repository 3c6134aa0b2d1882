"""Pairwise genotype distances between samples, accumulated per contig."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from pollo.triangular import TriangularMatrix, triangular_matrix_ij, triangular_matrix_len
from pollo.vcf import VcfRecord, read_vcf


@dataclass
class Dists:
    """Summed distances and the number of comparisons behind them."""

    dist: TriangularMatrix
    cmps: TriangularMatrix

    def __add__(self, other: "Dists") -> "Dists":
        return Dists(self.dist + other.dist, self.cmps + other.cmps)

    def __iadd__(self, other: "Dists") -> "Dists":
        self.dist = self.dist + other.dist
        self.cmps = self.cmps + other.cmps
        return self

    def to_dict(self) -> dict:
        return {"dist": self.dist.to_dict(), "cmps": self.cmps.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> "Dists":
        return cls(
            TriangularMatrix.from_dict(data["dist"]),
            TriangularMatrix.from_dict(data["cmps"]),
        )


class CrossCmpTri:
    """Expands a per-sample row into the row and column of every triangular cell."""

    def __init__(self, nsamples: int) -> None:
        pairs = [triangular_matrix_ij(k) for k in range(triangular_matrix_len(nsamples))]
        self.i_viewer = [i for i, _ in pairs]
        self.j_viewer = [j for _, j in pairs]

    def get_ij_arrs(self, row: Sequence[Any], stride: int) -> tuple[list, list]:
        """Values of the row and column sample of each cell, `stride` items per sample."""

        def gather(viewer: list[int]) -> list:
            return [item for x in viewer for item in row[x * stride:(x + 1) * stride]]

        return gather(self.i_viewer), gather(self.j_viewer)


def record_dists(record: VcfRecord, nsamples: int,
                 cct: CrossCmpTri) -> Optional[tuple[int, Dists]]:
    """Contig index and distances of one record, or None if its contig is unknown."""
    if record.rid is None:
        return None
    ac = record.allele_count
    counts = [[0] * ac for _ in range(nsamples)]
    missing = [False] * nsamples
    for sample, genotype in enumerate(record.genotypes()[:nsamples]):
        for allele in genotype:
            if allele is None:
                missing[sample] = True
            elif 0 <= allele < ac:
                counts[sample][allele] += 1
            else:
                raise ValueError(
                    f"allele index {allele} out of range for {ac} alleles"
                )

    gt_i, gt_j = cct.get_ij_arrs(counts, 1)
    ms_i, ms_j = cct.get_ij_arrs(missing, 1)
    mask = [a or b for a, b in zip(ms_i, ms_j)]
    distances = [
        0 if m else sum(max(x - y, 0) for x, y in zip(a, b))
        for a, b, m in zip(gt_i, gt_j, mask)
    ]
    comparisons = [0 if m else 1 for m in mask]
    return record.rid, Dists(
        TriangularMatrix(nsamples, distances),
        TriangularMatrix(nsamples, comparisons),
    )


def accumulate(per_contig: list[Optional[Dists]], rid: int, dists: Dists) -> None:
    """Add `dists` into the slot of contig `rid`, in place."""
    current = per_contig[rid]
    per_contig[rid] = dists if current is None else current + dists


def quick_read(path: str | Path) -> tuple[list[Optional[Dists]], list[str], list[str]]:
    """Per-contig sample distances, contig names and sample names of a VCF file."""
    header, records = read_vcf(path)
    samples = list(header.samples)
    contigs = header.contigs
    cct = CrossCmpTri(len(samples))
    per_contig: list[Optional[Dists]] = [None] * len(contigs)
    for record in records:
        result = record_dists(record, len(samples), cct)
        if result is not None:
            accumulate(per_contig, *result)
    return per_contig, contigs, samples