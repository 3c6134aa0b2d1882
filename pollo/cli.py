"""Command line: compute distances, choose guiders and phase a VCF."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from pollo.distances import Dists, quick_read
from pollo.guiders import Guider, gen_guiders
from pollo.phasing import write_phased
from pollo.vcf import OutputType, make_test

DEFAULT_MAX_GUIDERS = 5


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def _dists_to_json(dists: Optional[list[Optional[Dists]]]) -> Any:
    if dists is None:
        return None
    return [None if d is None else d.to_dict() for d in dists]


def _dists_from_json(data: Any) -> Optional[list[Optional[Dists]]]:
    if data is None:
        return None
    return [None if d is None else Dists.from_dict(d) for d in data]


def _guiders_from_json(data: Any) -> Optional[list[Optional[list[Guider]]]]:
    if data is None:
        return None
    return [
        None if contig is None else [
            [[(int(s), float(w)) for s, w in haplotype] for haplotype in sample]
            for sample in contig
        ]
        for contig in data
    ]


@dataclass
class StatsFile:
    """Distances and guiders saved between runs."""

    samples: list[str]
    contigs: list[str]
    sample_distances: Optional[list[Optional[Dists]]] = None
    phased_distances: Optional[list[Optional[Dists]]] = None
    guiders: Optional[list[Optional[list[Guider]]]] = None

    def to_json(self) -> str:
        return json.dumps({
            "samples": self.samples,
            "contigs": self.contigs,
            "sample_distances": _dists_to_json(self.sample_distances),
            "phased_distances": _dists_to_json(self.phased_distances),
            "guiders": self.guiders,
        })

    @classmethod
    def from_json(cls, text: str) -> "StatsFile":
        data = json.loads(text)
        return cls(
            samples=list(data["samples"]),
            contigs=list(data["contigs"]),
            sample_distances=_dists_from_json(data.get("sample_distances")),
            phased_distances=_dists_from_json(data.get("phased_distances")),
            guiders=_guiders_from_json(data.get("guiders")),
        )

    def save(self, path: str | Path) -> None:
        Path(path).write_text(self.to_json())

    @classmethod
    def load(cls, path: str | Path) -> "StatsFile":
        return cls.from_json(Path(path).read_text())


def run(input_file: str | Path, output: Optional[str | Path] = None,
        stats_file: Optional[str | Path] = None, max_guiders: Optional[int] = None,
        output_type: Optional[OutputType] = None,
        use_stats: Optional[str | Path] = None) -> None:
    """Phase `input_file`, optionally reusing and saving statistics."""
    imported = None
    imported_guiders = None
    if use_stats is not None:
        previous = StatsFile.load(use_stats)
        _log("(read stats file)")
        if previous.sample_distances is not None:
            imported = (previous.sample_distances, previous.contigs, previous.samples)
        imported_guiders = previous.guiders

    _log("starting quick read")
    if imported is not None:
        _log("(using imported distances)")
        dists, contigs, samples = imported
    else:
        dists, contigs, samples = quick_read(input_file)
    _log("distances calculated")

    def save(**extra: Any) -> None:
        if stats_file is not None:
            StatsFile(samples, contigs, sample_distances=dists, **extra).save(stats_file)

    save()

    if imported_guiders is not None:
        _log("(using imported guiders)")
        guiders = imported_guiders
    else:
        if max_guiders is None:
            limit: Optional[int] = DEFAULT_MAX_GUIDERS
        else:
            limit = max_guiders or None
        guiders = gen_guiders(dists, limit)
    _log("guiders generated")
    save(guiders=guiders)

    phased = write_phased(input_file, output, output_type or OutputType.B, guiders)
    _log("done phasing")
    save(phased_distances=phased, guiders=guiders)


def _thread_count(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid thread count: {text}") from exc
    if not 1 <= value <= 65535:
        raise argparse.ArgumentTypeError(f"thread count must be between 1 and 65535: {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pollo", description="Phase diploid genotypes.")
    parser.add_argument("-t", "--threads", type=_thread_count, default=1)
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate-test", help="write a small test VCF")
    gen.add_argument("file", type=Path)

    run_cmd = sub.add_parser("run", help="phase a VCF file")
    run_cmd.add_argument("input_file", type=Path)
    run_cmd.add_argument("-o", "--output", type=Path)
    run_cmd.add_argument("-s", "--stats", dest="stats_file", type=Path)
    run_cmd.add_argument("-g", "--max-guiders", type=int)
    run_cmd.add_argument("-O", "--output-type", choices=[t.value for t in OutputType])
    run_cmd.add_argument("-u", "--use-stats", type=Path)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.command == "generate-test":
        try:
            make_test(args.file)
        except OSError as exc:
            _log(str(exc))
    elif args.command == "run":
        try:
            run(
                args.input_file,
                output=args.output,
                stats_file=args.stats_file,
                max_guiders=args.max_guiders,
                output_type=OutputType(args.output_type) if args.output_type else None,
                use_stats=args.use_stats,
            )
        except (OSError, ValueError) as exc:
            _log(f"error: {exc}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())