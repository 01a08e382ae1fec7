"""
Test suite for query parsing, model bank loading and the prediction run.
"""
import io
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import pytest

from nrpspred import predictor as predictor_module
from nrpspred.domain import ADomain
from nrpspred.encodings import FeatureEncoding, encode
from nrpspred.errors import ParseError
from nrpspred.predictions import PredictionCategory
from nrpspred.predictor import (
    Predictor,
    extract_name,
    load_models,
    parse_domains,
    predict_svm,
    read_domains,
    run,
)
from nrpspred.predictor_config import PredictorConfig
from nrpspred.stachelhaus import load_signatures
from nrpspred.svm_model import KernelType, SupportVector, SVMModel

from conftest import AA10_A, SIGNATURE_A, SIGNATURE_B, write_model_bank


class TestParseDomains(unittest.TestCase):

    def test_two_fields(self):
        domains = parse_domains(io.StringIO(f"{SIGNATURE_B}\tbpsA_A1"))
        self.assertEqual(domains, [ADomain("bpsA_A1", SIGNATURE_B)])

    def test_three_fields(self):
        domains = parse_domains([f"{SIGNATURE_B}\tHpg\tCAC48361.1.A1\n"])
        self.assertEqual(domains[0].name, "CAC48361.1.A1_Hpg")

    def test_blank_lines_and_bytes(self):
        domains = parse_domains([b"\n", f"{SIGNATURE_A}\tdomA\n".encode(), b"   \n"])
        self.assertEqual(len(domains), 1)

    def test_invalid_lines(self):
        for line in (SIGNATURE_B, f"{SIGNATURE_B[:20]}\tshort", f"{SIGNATURE_B}X\tlong"):
            with self.assertRaises(ParseError, msg=line):
                parse_domains([line])

    def test_skip_invalid(self):
        lines = [f"{SIGNATURE_A}\tdomA", "garbage", f"{SIGNATURE_B}\tdomB"]
        domains = parse_domains(lines, skip_invalid=True)
        self.assertEqual([d.name for d in domains], ["domA", "domB"])

    def test_invalid_utf8(self):
        lines = [f"{SIGNATURE_A}\tdomA\n".encode(), b"\xff\xfe garbage\n", f"{SIGNATURE_B}\tdomB\n".encode()]
        with self.assertRaises(ParseError) as ctx:
            parse_domains(lines)
        self.assertIn("xff", ctx.exception.content)
        domains = parse_domains(lines, skip_invalid=True)
        self.assertEqual([d.name for d in domains], ["domA", "domB"])

    def test_read_skips_undecodable_line(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "query.tsv"
            path.write_bytes(f"{SIGNATURE_A}\tdomA\n".encode() + b"\xff\tbad\n" + f"{SIGNATURE_B}\tdomB\n".encode())
            with self.assertRaises(ParseError):
                read_domains(path)
            self.assertEqual(len(read_domains(path, skip_invalid=True)), 2)

    def test_lowercase_signature(self):
        domain = parse_domains([f"{SIGNATURE_A.lower()}\tdomA"])[0]
        self.assertEqual(domain.aa34, SIGNATURE_A)
        self.assertEqual(domain.aa10, AA10_A)

    def test_read_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            read_domains("nonexistent_signatures.tsv")


class TestModelBank(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.model_dir = write_model_bank(self.tmp / "models")

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_extract_name(self):
        info = extract_name(Path("/models/[rausch_Phe_Tyr].mdl"))
        self.assertEqual(info.name, "rausch_Phe_Tyr")
        self.assertIs(info.encoding, FeatureEncoding.RAUSCH)
        self.assertIs(extract_name("[Leu].mdl").encoding, FeatureEncoding.WOLD)
        self.assertEqual(extract_name("[Leu].mdl").name, "Leu")
        # Unknown prefix falls back to the default encoding
        self.assertIs(extract_name("foo_Phe_Tyr.mdl").encoding, FeatureEncoding.WOLD)

    def test_load_models(self):
        models = load_models(self.model_dir)
        self.assertEqual(
            [(m.category, m.name) for m in models],
            [
                (PredictionCategory.LEGACY_LARGE_CLUSTER, "rausch_Phe_Tyr"),
                (PredictionCategory.LARGE_CLUSTER, "Leu"),
                (PredictionCategory.LARGE_CLUSTER, "Val"),
            ],
        )
        self.assertIs(models[0].encoding, FeatureEncoding.RAUSCH)

    def test_load_selected_categories(self):
        models = load_models(self.model_dir, [PredictionCategory.LARGE_CLUSTER])
        self.assertEqual({m.category for m in models}, {PredictionCategory.LARGE_CLUSTER})

    def test_missing_model_dir(self):
        with self.assertRaises(FileNotFoundError):
            load_models(self.tmp / "nowhere")


class TestPredictor(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.model_dir = write_model_bank(self.tmp / "models")
        self.models = load_models(self.model_dir)
        self.signatures = load_signatures(self.model_dir / "signatures.tsv")

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_positive_votes_only(self):
        domain = Predictor(self.models).predict([ADomain("domA", SIGNATURE_A)])[0]
        large = domain.get_all(PredictionCategory.LARGE_CLUSTER)
        self.assertEqual([p.name for p in large], ["Leu"])
        self.assertGreater(large[0].score, 0.0)
        self.assertEqual(
            [p.name for p in domain.get_all(PredictionCategory.LEGACY_LARGE_CLUSTER)],
            ["rausch_Phe_Tyr"],
        )
        # No signatures loaded, no Stachelhaus call
        self.assertEqual(domain.get_all(PredictionCategory.STACHELHAUS), [])

    def test_zero_decision_value_does_not_vote(self):
        vector = encode(SIGNATURE_A, FeatureEncoding.WOLD)
        support = SupportVector(values=vector, yalpha=1.0)

        def model(bias):
            return SVMModel(
                name="Gly",
                category=PredictionCategory.SMALL_CLUSTER,
                kernel_type=KernelType.LINEAR,
                gamma=1.0,
                bias=bias,
                dimension=vector.size,
                vectors=(support,),
            )

        # Bias equal to the kernel sum puts the query on the decision boundary
        boundary = model(model(0.0).predict(vector))
        self.assertEqual(boundary.predict(vector), 0.0)
        domain = predict_svm(ADomain("domA", SIGNATURE_A), [boundary])
        self.assertEqual(domain.get_all(PredictionCategory.SMALL_CLUSTER), [])
        self.assertEqual(domain.categories(), [])

    def test_zero_workers_rejected(self):
        with self.assertRaises(ValueError):
            Predictor(self.models).predict([ADomain("domA", SIGNATURE_A)], n_jobs=0)

    def test_lowercase_query_gets_stachelhaus_hit(self):
        domain = Predictor(self.models, self.signatures).predict([ADomain("domA", SIGNATURE_A.lower())])[0]
        self.assertEqual(domain.get_best(PredictionCategory.STACHELHAUS)[0].name, "Leu")
        self.assertEqual([p.name for p in domain.get_all(PredictionCategory.LARGE_CLUSTER)], ["Leu"])

    def test_stachelhaus_call(self):
        predictor = Predictor(self.models, self.signatures)
        domain = predictor.predict([ADomain("domA", SIGNATURE_A)])[0]
        self.assertEqual(domain.get_best(PredictionCategory.STACHELHAUS)[0].name, "Leu")
        self.assertAlmostEqual(domain.get_best(PredictionCategory.STACHELHAUS)[0].score, 1.0)

        skipped = predictor.predict([ADomain("domA", SIGNATURE_A)], skip_stachelhaus=True)[0]
        self.assertEqual(len(skipped.stach_predictions), 0)

    def test_category_filter(self):
        predictor = Predictor(self.models, self.signatures)
        domain = predictor.predict(
            [ADomain("domA", SIGNATURE_A)],
            categories=[PredictionCategory.LARGE_CLUSTER],
        )[0]
        self.assertEqual(domain.categories(), [PredictionCategory.LARGE_CLUSTER])

    def test_encodes_once_per_variant(self):
        # Two Wold models share one encoding, the legacy Rausch model needs its own
        with mock.patch.object(predictor_module, "encode", wraps=predictor_module.encode) as encode:
            Predictor(self.models).predict([ADomain("domA", SIGNATURE_A), ADomain("domB", SIGNATURE_B)])
        self.assertEqual(encode.call_count, 4)

    def test_input_order_is_kept(self):
        domains = [ADomain(f"d{i}", SIGNATURE_A if i % 2 else SIGNATURE_B) for i in range(5)]
        results = Predictor(self.models).predict(domains)
        self.assertEqual([d.name for d in results], [f"d{i}" for i in range(5)])


# =============================================================================
# Pytest-style tests using shared fixtures
# =============================================================================

def test_parallel_equals_sequential(model_bank):
    models = load_models(model_bank)
    signatures = load_signatures(model_bank / "signatures.tsv")

    def domains():
        return [ADomain(f"d{i}", SIGNATURE_A if i % 2 else SIGNATURE_B) for i in range(6)]

    sequential = Predictor(models, signatures).predict(domains(), n_jobs=1)
    parallel = Predictor(models, signatures).predict(domains(), n_jobs=2)
    assert parallel == sequential


def test_run(model_bank, query_file):
    config = PredictorConfig(model_dir=model_bank, skip_current=True)
    domains = run(config, query_file)

    assert [d.name for d in domains] == ["domA", "CAC48361.1.A1_Hpg"]
    assert domains[0].get_all(PredictionCategory.LARGE_CLUSTER) == []
    assert [p.name for p in domains[0].get_all(PredictionCategory.LEGACY_LARGE_CLUSTER)] == ["rausch_Phe_Tyr"]
    assert domains[0].stach_best()[0].name == "Leu"


def test_run_missing_signature_database(model_bank, query_file, temp_dir):
    config = PredictorConfig(model_dir=model_bank, stachelhaus_signatures=temp_dir / "missing.tsv")
    with pytest.raises(FileNotFoundError):
        run(config, query_file)

    config = PredictorConfig(
        model_dir=model_bank,
        stachelhaus_signatures=temp_dir / "missing.tsv",
        skip_stachelhaus=True,
    )
    assert len(run(config, query_file)) == 2


def test_run_stops_at_invalid_query(model_bank, temp_dir):
    query = temp_dir / "bad.tsv"
    query.write_text(f"{SIGNATURE_A}\tdomA\nnot a signature\n")
    config = PredictorConfig(model_dir=model_bank)
    with pytest.raises(ParseError):
        run(config, query)
    assert len(run(config, query, skip_invalid=True)) == 1
