"""Minimal reading and writing of VCF text files."""

from __future__ import annotations

import enum
import gzip
import io
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterator, Optional

Allele = Optional[int]

_CONTIG_RE = re.compile(r"^##contig=<.*?ID=([^,>]+)")


class OutputType(enum.Enum):
    """Output kinds: V/U uncompressed text, Z/B gzip-compressed text."""

    V = "v"
    Z = "z"
    U = "u"
    B = "b"

    @property
    def compressed(self) -> bool:
        return self in (OutputType.Z, OutputType.B)


@dataclass
class VcfHeader:
    meta: list[str] = field(default_factory=lambda: ["##fileformat=VCFv4.2"])
    samples: list[str] = field(default_factory=list)

    @property
    def contigs(self) -> list[str]:
        return [m.group(1) for line in self.meta if (m := _CONTIG_RE.match(line))]

    def add_format(self, ident: str, number: object, type_: str, description: str) -> None:
        self.meta.append(
            f'##FORMAT=<ID={ident},Number={number},Type={type_},Description="{description}">'
        )

    def contig_index(self, name: str) -> Optional[int]:
        try:
            return self.contigs.index(name)
        except ValueError:
            return None

    def lines(self) -> list[str]:
        columns = ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]
        if self.samples:
            columns += ["FORMAT", *self.samples]
        return [*self.meta, "\t".join(columns)]

    @classmethod
    def _from_lines(cls, lines: list[str]) -> "VcfHeader":
        meta = [l for l in lines if l.startswith("##")]
        samples: list[str] = []
        for line in lines:
            if line.startswith("#CHROM"):
                samples = line.split("\t")[9:]
        return cls(meta, samples)


def parse_genotype(text: str) -> list[Allele]:
    """Alleles of a GT value such as '0/1', '1|0' or '.'."""
    return [None if a == "." else int(a) for a in re.split(r"[/|]", text)]


def format_genotype(alleles: list[Allele], phased: bool) -> str:
    sep = "|" if phased else "/"
    return sep.join("." if a is None else str(a) for a in alleles)


def _format_qual(qual: Optional[float]) -> str:
    if qual is None:
        return "."
    return str(int(qual)) if float(qual).is_integer() else repr(qual)


@dataclass
class VcfRecord:
    chrom: str
    pos: int
    rid: Optional[int] = None
    ident: str = "."
    alleles: list[str] = field(default_factory=list)
    qual: Optional[float] = None
    filters: list[str] = field(default_factory=list)
    info: str = "."
    format: list[str] = field(default_factory=list)
    samples: list[list[str]] = field(default_factory=list)

    @property
    def allele_count(self) -> int:
        return len(self.alleles)

    def genotypes(self) -> list[list[Allele]]:
        """GT alleles per sample; samples without GT are all-missing."""
        if "GT" not in self.format:
            return [[None] for _ in self.samples]
        pos = self.format.index("GT")
        return [
            parse_genotype(s[pos]) if pos < len(s) else [None] for s in self.samples
        ]

    def to_line(self) -> str:
        cols = [
            self.chrom,
            str(self.pos + 1),
            self.ident or ".",
            self.alleles[0] if self.alleles else ".",
            ",".join(self.alleles[1:]) or ".",
            _format_qual(self.qual),
            ";".join(self.filters) or ".",
            self.info or ".",
        ]
        if self.format:
            cols.append(":".join(self.format))
            cols += [":".join(s) for s in self.samples]
        return "\t".join(cols)

    @classmethod
    def from_line(cls, line: str, header: VcfHeader) -> "VcfRecord":
        cols = line.rstrip("\r\n").split("\t")
        if len(cols) < 8:
            raise ValueError(f"VCF record has {len(cols)} columns, expected at least 8")
        try:
            pos = int(cols[1]) - 1
            qual = None if cols[5] == "." else float(cols[5])
        except ValueError as exc:
            raise ValueError(f"malformed VCF record: {exc}") from exc
        alleles = [cols[3]] + ([] if cols[4] == "." else cols[4].split(","))
        fmt = cols[8].split(":") if len(cols) > 8 else []
        samples = [c.split(":") for c in cols[9:]]
        if len(samples) != len(header.samples):
            raise ValueError("number of sample columns does not match header")
        return cls(
            chrom=cols[0],
            pos=pos,
            rid=header.contig_index(cols[0]),
            ident=cols[2],
            alleles=alleles,
            qual=qual,
            filters=[] if cols[6] == "." else cols[6].split(";"),
            info=cols[7],
            format=fmt,
            samples=samples,
        )


def _open_text(path: Path) -> IO[str]:
    with open(path, "rb") as probe:
        magic = probe.read(2)
    if magic == b"\x1f\x8b":
        return gzip.open(path, "rt")
    return open(path, "r")


def read_vcf(path: str | Path) -> tuple[VcfHeader, Iterator[VcfRecord]]:
    """Header and a lazy iterator of records; malformed records are skipped."""
    handle = _open_text(Path(path))
    header_lines: list[str] = []
    first_record: Optional[str] = None
    for line in handle:
        if line.startswith("#"):
            header_lines.append(line.rstrip("\r\n"))
        else:
            first_record = line
            break
    header = VcfHeader._from_lines(header_lines)

    def records() -> Iterator[VcfRecord]:
        with handle:
            lines = handle if first_record is None else _chain(first_record, handle)
            for rn, line in enumerate(lines):
                if not line.strip():
                    continue
                try:
                    yield VcfRecord.from_line(line, header)
                except ValueError as exc:
                    print(f"skipping record {rn} due to problem: {exc}", file=sys.stderr)

    return header, records()


def _chain(first: str, rest: IO[str]) -> Iterator[str]:
    yield first
    yield from rest


class VcfWriter:
    """Writes a header and then records to a file or standard output."""

    def __init__(self, path: Optional[str | Path], header: VcfHeader,
                 output_type: OutputType = OutputType.V) -> None:
        self.header = header
        self._owns = True
        if path is None:
            if output_type.compressed:
                self._handle: IO[str] = io.TextIOWrapper(
                    gzip.GzipFile(fileobj=sys.stdout.buffer, mode="wb"))
            else:
                self._handle = sys.stdout
                self._owns = False
        elif output_type.compressed:
            self._handle = gzip.open(path, "wt")
        else:
            self._handle = open(path, "w")
        for line in header.lines():
            self._handle.write(line + "\n")

    def write(self, record: VcfRecord) -> None:
        self._handle.write(record.to_line() + "\n")

    def close(self) -> None:
        if self._owns:
            self._handle.close()
        else:
            self._handle.flush()

    def __enter__(self) -> "VcfWriter":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_TEST_SAMPLES = [(0, 1), (1, 2), (0, 2), (1, 1)]
_TEST_CHROMS = [
    [1, 0, 0, 0, 1, 0, 0, 1, 0, 1],
    [0, 1, 1, 0, 1, 0, 1, 0, 1, 0],
    [1, 0, 1, 0, 1, 1, 0, 1, 1, 1],
]


def make_test(path: str | Path) -> None:
    """Write a small synthetic VCF of four diploid samples on contig Z."""
    letters = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    header = VcfHeader(samples=[letters[a] + letters[b] for a, b in _TEST_SAMPLES])
    header.meta.append("##contig=<ID=Z,length=100>")
    header.add_format("GT", 1, "String", "Genotype")
    with VcfWriter(path, header, OutputType.V) as writer:
        for i in range(len(_TEST_CHROMS[0])):
            samples = [
                [format_genotype(sorted([_TEST_CHROMS[a][i], _TEST_CHROMS[b][i]]), False)]
                for a, b in _TEST_SAMPLES
            ]
            writer.write(VcfRecord(chrom="Z", pos=i, rid=0, alleles=["G", "T"],
                                   format=["GT"], samples=samples))