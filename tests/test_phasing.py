import pytest

from pollo.phasing import PhasedCall, phase_record, phase_sample, to_genotype, write_phased
from pollo.vcf import OutputType, make_test, read_vcf


def test_to_genotype_sorts_unphased():
    assert to_genotype([1, 0], False) == "0/1"


def test_to_genotype_keeps_phased_order():
    assert to_genotype([1, 0], True) == "1|0"


def test_to_genotype_missing_sorts_first():
    assert to_genotype([1, None], False) == "./1"


def test_to_genotype_empty_raises():
    with pytest.raises(ValueError):
        to_genotype([], False)


def test_phase_sample_homozygous():
    assert phase_sample([[1, 1]], 0, [[], []]) == PhasedCall([1, 1], True, 100)


def test_phase_sample_missing():
    assert phase_sample([[None, None]], 0, [[], []]) == PhasedCall([None, None], False, 0)


def test_phase_sample_tie_is_unphased():
    call = phase_sample([[0, 1], [0, 0]], 0, [[], []])
    assert call.phased is False
    assert call.score == 0
    assert call.alleles == [0, 1]


def test_phase_sample_keeps_order_when_supported():
    genotypes = [[0, 1], [0, 0], [1, 1]]
    call = phase_sample(genotypes, 0, [[(1, 1.0)], [(2, 1.0)]])
    assert call == PhasedCall([0, 1], True, 100)


def test_phase_sample_swaps_when_contradicted():
    genotypes = [[0, 1], [0, 0], [1, 1]]
    call = phase_sample(genotypes, 0, [[(2, 1.0)], [(1, 1.0)]])
    assert call == PhasedCall([1, 0], True, 100)


def test_phase_sample_partial_evidence_score():
    genotypes = [[0, 1], [0, 0], [0, 0]]
    call = phase_sample(genotypes, 0, [[(1, 0.75)], [(2, 0.25)]])
    assert call.phased is True
    assert call.alleles == [0, 1]
    assert call.score == 6


def test_phase_record_distance_shapes():
    genotypes = [[0, 1], [0, 0], [1, 1]]
    guider = [[[(1, 1.0)], [(2, 1.0)]], [[], []], [[], []]]
    calls, dists = phase_record(genotypes, guider)
    assert [c.phased for c in calls] == [True, True, True]
    assert dists.dist.size == 6
    assert dists.cmps.size == 6
    assert all(c == 1 for c in dists.cmps.vec)
    assert all(d <= c for d, c in zip(dists.dist.vec, dists.cmps.vec))
    # diagonal cells compare a haplotype with itself
    assert all(dists.dist[i, i] == 0 for i in range(6))


def test_phase_record_unphased_samples_not_compared():
    calls, dists = phase_record([[0, 1], [1, 1]], [[[], []], [[], []]])
    assert calls[0].phased is False
    assert dists.cmps[0, 2] == 0
    assert dists.cmps[1, 3] == 0
    assert dists.cmps[2, 3] == 1


def test_phase_record_rejects_other_ploidy():
    with pytest.raises(ValueError):
        phase_record([[0, 1, 1]], [[[], []]])


def test_write_phased_without_evidence(tmp_path):
    source = tmp_path / "in.vcf"
    out = tmp_path / "out.vcf"
    make_test(source)
    guiders = [[[[], []] for _ in range(4)]]
    result = write_phased(source, out, OutputType.V, guiders)

    header, records = read_vcf(out)
    records = list(records)
    assert any(line.startswith("##FORMAT=<ID=PQ") for line in header.meta)
    assert header.samples == ["AB", "BC", "AC", "BB"]
    assert len(records) == 10
    for rec in records:
        assert rec.format == ["GT", "PQ"]
        gt, pq = rec.samples[3]
        assert "|" in gt
        assert pq == "100"
        for sample_gt, sample_pq in rec.samples:
            if "/" in sample_gt:
                assert sample_pq == "0"
    assert len(result) == 1
    assert result[0].dist.size == 8


def test_write_phased_skips_contigs_without_guiders(tmp_path):
    source = tmp_path / "in.vcf"
    out = tmp_path / "out.vcf"
    make_test(source)
    result = write_phased(source, out, OutputType.V, [None])
    _, records = read_vcf(out)
    assert list(records) == []
    assert result == [None]