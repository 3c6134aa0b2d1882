# pollo

pollo phases diploid genotypes in a VCF file. It uses the other samples in
the file as guides. It works in three steps:

1. **Distances** (`pollo.distances.quick_read`). A first pass over the input
   works out, for every contig declared in the header, how far apart each pair
   of samples is. For each site, the distance is the sum over alleles of the
   positive part of the allele-count difference. A site counts only where
   neither sample has a missing allele.
2. **Guiders** (`pollo.guiders.gen_guiders`). The distances are turned into a
   correlation matrix, `1 - dist / (2 * comparisons)`. Cells with no
   comparisons are set to 0. For each sample, pollo picks the pair of other
   samples that best separates it. It then weights the remaining samples as
   evidence for one haplotype or the other. The weights on each side are
   normalised to sum to 1.
3. **Phasing** (`pollo.phasing.write_phased`). A second pass phases every
   heterozygous genotype from the weighted evidence. Each sample gets a `PQ`
   (phasing quality) FORMAT value, capped at 100:
   - Where the evidence is tied, the genotype is left unphased with `PQ` 0.
   - Homozygous genotypes are written phased with `PQ` 100.
   - Fully missing genotypes are left unphased with `PQ` 0.

## Installation

```
pip install .
```

## Usage

Phase a file and write plain VCF to `phased.vcf`:

```
pollo run input.vcf -o phased.vcf -O v
```

Options of `run`:

| Option | Meaning |
| --- | --- |
| `-o`, `--output PATH` | Output file. Without it, output goes to standard output. |
| `-O`, `--output-type {v,z,u,b}` | `v` and `u` write plain VCF text. `z` and `b` write gzip-compressed VCF text. The default is `b`. |
| `-g`, `--max-guiders N` | Guiding samples kept per haplotype. The default is 5. `0` keeps them all. |
| `-s`, `--stats PATH` | Write the sample distances, guiders and phased haplotype distances as JSON. The file is updated after each step. |
| `-u`, `--use-stats PATH` | Reuse the distances and guiders found in an earlier stats file instead of computing them. |

The global option `-t`, `--threads N` must be between 1 and 65535. It is
checked, but it does not change how the work is done.

When `run` fails on a file it cannot read or a malformed input, it prints
`error: ...` to standard error and exits with status 1. An input genotype that
is not diploid is such a failure. Records that cannot be parsed are skipped,
and a message goes to standard error. Progress messages also go to standard
error.

Write a small plain-VCF test file with four samples on contig `Z`:

```
pollo generate-test example.vcf
```

## Library use

```python
from pollo.distances import quick_read
from pollo.guiders import gen_guiders
from pollo.phasing import write_phased
from pollo.vcf import OutputType

dists, contigs, samples = quick_read("input.vcf")
guiders = gen_guiders(dists, 5)
phased_dists = write_phased("input.vcf", "phased.vcf", OutputType.V, guiders)
```

Other building blocks:

- `pollo.vcf`: `read_vcf`, `VcfHeader`, `VcfRecord`, `VcfWriter`,
  `parse_genotype`, `format_genotype` and `make_test`.
- `pollo.distances`: `Dists`, `CrossCmpTri`, `record_dists` and
  `accumulate`.
- `pollo.guiders`: `sample_guiders` and `deque_insert_replace`.
- `pollo.phasing`: `phase_sample`, `phase_record` and `to_genotype`.
- `pollo.triangular.TriangularMatrix`: the symmetric pairwise matrix these
  functions use. It stores only the lower triangle, including the diagonal,
  and supports element-wise arithmetic.
- `pollo.cli`: `run` and `main`.

The stats file is JSON and is handled by `pollo.cli.StatsFile` (`save`,
`load`, `to_json`, `from_json`). It has these fields:

- `samples`
- `contigs`
- `sample_distances`
- `phased_distances`
- `guiders`

## Limitations

- Input and output are VCF text only, plain or gzip-compressed. BCF is
  neither read nor written. The `u` and `b` output types produce VCF text.
- Only diploid genotypes are supported.
- The output keeps CHROM, POS, ID, REF/ALT, QUAL and FILTER. INFO is written
  as `.`, and FORMAT holds only `GT` and `PQ`.
- Records on contigs that have no `##contig` line in the header are left out
  of the output.
- Work runs in a single thread.