"""Tests for chunk planning."""

from framework_eval.core.evaluation import plan_chunks
from framework_eval.core.frameworks import BUILTIN_FRAMEWORKS, FrameworkDefinition


class TestPlanChunks:
    """plan_chunks partitions a framework into one chunk per category."""

    def test_one_chunk_per_category_in_order(self, value_framework):
        chunks = plan_chunks(value_framework)

        assert [c.category_key for c in chunks] == ["functional", "emotional"]
        assert [c.category_name for c in chunks] == ["Functional", "Emotional"]
        assert chunks[0].elements == ("saves_time", "simplifies")

    def test_builtin_frameworks_partition_exactly(self):
        for key, framework in BUILTIN_FRAMEWORKS.items():
            chunks = plan_chunks(framework)
            flattened = [el for chunk in chunks for el in chunk.elements]
            expected = [el for cat in framework.categories for el in cat.elements]

            assert flattened == expected, key
            assert len(flattened) == len(set(flattened)), key
            assert len(chunks) == len(framework.categories)

    def test_empty_framework_plans_nothing(self):
        framework = FrameworkDefinition(name="Empty", categories=[])
        assert plan_chunks(framework) == []

    def test_planning_is_deterministic(self, value_framework):
        assert plan_chunks(value_framework) == plan_chunks(value_framework)
