"""Tests for expression category classification."""

import pytest
import numpy as np
import pandas as pd


class TestClassification:
    """Test category assignment."""

    def test_categories(self, bodypart_expression):
        from bodymap_pipeline.classification import ExpressionClassifier

        result = ExpressionClassifier().classify(bodypart_expression)
        categories = {r.gene: r.category.value for r in result}

        assert categories == {
            "weak_gene": "Weak",
            "broad_gene": "Broad",
            "specific_gene": "Specific",
            "flat_gene": "Broad",
        }

    def test_null_genes_omitted_from_records(self, bodypart_expression):
        from bodymap_pipeline.classification import ExpressionClassifier

        result = ExpressionClassifier().classify(bodypart_expression)

        assert result.null_genes == ["null_gene", "edge_null_gene"]
        assert "null_gene" not in result.to_dataframe().index
        assert len(result) == 4

    def test_value_of_exactly_one_is_not_expressed(self):
        from bodymap_pipeline.classification import classify_genes

        expr = pd.DataFrame({"Leaf": [1.0], "Root": [1.0]}, index=["g"])
        result = classify_genes(expr)

        assert result.null_genes == ["g"]
        assert len(result) == 0

    def test_records_follow_input_order(self, bodypart_expression):
        from bodymap_pipeline.classification import ExpressionClassifier

        result = ExpressionClassifier().classify(bodypart_expression)

        assert [r.gene for r in result] == [
            "weak_gene", "broad_gene", "specific_gene", "flat_gene",
        ]

    def test_broad_example_score(self):
        from bodymap_pipeline.classification import classify_genes

        expr = pd.DataFrame(
            {"Leaf": [0.2, 10.0], "Root": [0.1, 1.0]},
            index=["A", "B"],
        )
        result = classify_genes(expr)

        assert result.null_genes == ["A"]
        (record,) = result.records
        assert record.gene == "B"
        assert record.score == pytest.approx(0.711, abs=1e-3)
        assert record.category.value == "Broad"
        assert record.specific_parts == ()

    def test_score_just_below_cutoff_is_broad(self):
        from bodymap_pipeline.classification import classify_genes

        # tau = 1 - 1/log2(101) is about 0.8498
        expr = pd.DataFrame(
            {"Leaf": [100.0], "Root": [1.0], "Shoot": [1.0]},
            index=["C"],
        )
        (record,) = classify_genes(expr).records

        assert record.score == pytest.approx(0.8498, abs=1e-4)
        assert record.category.value == "Broad"

    def test_specific_parts(self, bodypart_expression):
        from bodymap_pipeline.classification import ExpressionClassifier

        result = ExpressionClassifier().classify(bodypart_expression)
        record = next(r for r in result if r.gene == "specific_gene")

        assert record.score == pytest.approx(1 - 1 / np.log2(1001))
        assert record.specific_parts == ("Leaf",)
        assert record.max_part == "Leaf"

    def test_specific_in_two_parts(self):
        from bodymap_pipeline.classification import classify_genes

        expr = pd.DataFrame(
            {"Leaf": [5000.0], "Flower": [6.0], "Root": [0.0], "Seed": [0.0]},
            index=["g"],
        )
        (record,) = classify_genes(expr).records

        assert record.category.value == "Specific"
        assert record.specific_parts == ("Leaf", "Flower")


class TestClassificationProperties:
    """Invariants that hold on random matrices."""

    @pytest.fixture
    def random_result(self):
        from bodymap_pipeline.classification import classify_genes

        np.random.seed(0)
        values = np.random.lognormal(mean=0.5, sigma=2.0, size=(500, 5))
        values[np.random.rand(*values.shape) < 0.3] = 0.0
        expr = pd.DataFrame(
            values,
            index=[f"gene_{i}" for i in range(500)],
            columns=["Leaf", "Root", "Seed", "Flower", "Stem"],
        )
        return expr, classify_genes(expr)

    def test_scores_in_range(self, random_result):
        _, result = random_result
        scores = np.array([r.score for r in result])

        assert ((scores >= 0) & (scores <= 1)).all()

    def test_partition(self, random_result):
        expr, result = random_result
        emitted = {r.gene for r in result}

        assert emitted.isdisjoint(result.null_genes)
        assert emitted | set(result.null_genes) == set(expr.index)
        assert {r.category.value for r in result} <= {"Weak", "Broad", "Specific"}

    def test_specific_parts_invariants(self, random_result):
        expr, result = random_result

        for r in result:
            if r.category.value == "Specific":
                assert r.specific_parts
                assert all(expr.loc[r.gene, p] > 5 for p in r.specific_parts)
            else:
                assert r.specific_parts == ()

    def test_idempotent(self, random_result):
        from bodymap_pipeline.classification import classify_genes

        expr, result = random_result
        again = classify_genes(expr)

        assert again.records == result.records
        pd.testing.assert_frame_equal(again.to_dataframe(), result.to_dataframe())


class TestThresholds:
    """Test configurable thresholds."""

    def test_lower_specificity_threshold(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.config import ClassifierConfig

        expr = pd.DataFrame({"Leaf": [10.0], "Root": [1.0]}, index=["B"])
        result = classify_genes(expr, config=ClassifierConfig(specificity_threshold=0.7))

        assert result.records[0].category.value == "Specific"
        assert result.records[0].specific_parts == ("Leaf",)

    def test_higher_stable_threshold_makes_weak(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.config import ClassifierConfig

        expr = pd.DataFrame({"Leaf": [10.0], "Root": [1.0]}, index=["B"])
        result = classify_genes(expr, config=ClassifierConfig(stable_threshold=20.0))

        assert result.records[0].category.value == "Weak"

    def test_supplied_log_matrix_is_used(self):
        from bodymap_pipeline.classification import classify_genes

        expr = pd.DataFrame({"Leaf": [10.0], "Root": [10.0]}, index=["g"])
        log_expr = pd.DataFrame({"Leaf": [3.0], "Root": [0.0]}, index=["g"])
        result = classify_genes(expr, log_expression=log_expr)

        assert result.records[0].score == pytest.approx(1.0)
        assert result.records[0].category.value == "Specific"
        assert result.records[0].specific_parts == ("Leaf", "Root")

    def test_larger_pseudocount_scores_zero_part(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.config import ClassifierConfig

        # log2(12) = 3.585, log2(2) = 1
        expr = pd.DataFrame({"Leaf": [10.0], "Root": [0.0]}, index=["g"])
        result = classify_genes(expr, config=ClassifierConfig(pseudocount=2.0))

        assert result.records[0].score == pytest.approx(1 - 1 / np.log2(12))
        assert result.records[0].category.value == "Broad"


class TestValidation:
    """Test input validation."""

    def test_duplicate_genes(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.errors import InvalidInputError

        expr = pd.DataFrame({"Leaf": [1.0, 2.0], "Root": [1.0, 2.0]}, index=["g", "g"])
        with pytest.raises(InvalidInputError, match="Duplicate gene"):
            classify_genes(expr)

    def test_duplicate_parts(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.errors import InvalidInputError

        expr = pd.DataFrame([[1.0, 2.0]], index=["g"], columns=["Leaf", "Leaf"])
        with pytest.raises(InvalidInputError, match="Duplicate body part"):
            classify_genes(expr)

    def test_single_part(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.errors import InvalidInputError

        expr = pd.DataFrame({"Leaf": [10.0]}, index=["g"])
        with pytest.raises(InvalidInputError, match="At least 2"):
            classify_genes(expr)

    def test_negative_values(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.errors import InvalidInputError

        expr = pd.DataFrame({"Leaf": [10.0], "Root": [-1.0]}, index=["g"])
        with pytest.raises(InvalidInputError, match="non-negative"):
            classify_genes(expr)

    def test_non_numeric(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.errors import InvalidInputError

        expr = pd.DataFrame({"Leaf": [10.0], "Root": ["high"]}, index=["g"])
        with pytest.raises(InvalidInputError, match="Non-numeric"):
            classify_genes(expr)

    def test_invalid_input_is_value_error(self):
        from bodymap_pipeline.core.errors import InvalidInputError

        assert issubclass(InvalidInputError, ValueError)

    def test_non_finite_genes_excluded(self):
        from bodymap_pipeline.classification import classify_genes

        expr = pd.DataFrame(
            {"Leaf": [10.0, np.nan, np.inf], "Root": [1.0, 3.0, 2.0]},
            index=["ok", "missing", "infinite"],
        )
        result = classify_genes(expr)

        assert result.excluded_genes == ["missing", "infinite"]
        assert [r.gene for r in result] == ["ok"]

    def test_log_matrix_must_align(self):
        from bodymap_pipeline.classification import classify_genes
        from bodymap_pipeline.core.errors import InvalidInputError

        expr = pd.DataFrame({"Leaf": [10.0], "Root": [1.0]}, index=["g"])
        log_expr = pd.DataFrame({"Leaf": [3.0], "Seed": [1.0]}, index=["g"])
        with pytest.raises(InvalidInputError):
            classify_genes(expr, log_expression=log_expr)

    def test_empty_matrix(self):
        from bodymap_pipeline.classification import classify_genes

        expr = pd.DataFrame({"Leaf": [], "Root": []}, dtype=float)
        result = classify_genes(expr)

        assert len(result) == 0
        assert result.body_parts == ["Leaf", "Root"]
