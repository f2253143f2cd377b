"""Tests for collection reducers."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CollectionSync.actions import Create, Delete, Read, Update, remove_instances, upsert_instances
from CollectionSync.core.fields import Field
from CollectionSync.core.model import Model
from CollectionSync.errors import ActionConfigurationError, ModelConfigurationError
from CollectionSync.store import Action, CollectionState


def _model(**kwargs) -> Model:
    return Model("items", {"k": Field(primary=True), "v": Field()}, **kwargs)


class TestUpsertReducer(unittest.TestCase):
    def test_distinct_keys_are_inserted(self) -> None:
        state = upsert_instances(CollectionState(), [{"k": "k1", "v": 1}, {"k": "k2", "v": 2}], _model())
        self.assertEqual(dict(state.instances), {"k1": {"k": "k1", "v": 1}, "k2": {"k": "k2", "v": 2}})

    def test_later_duplicate_wins(self) -> None:
        state = upsert_instances(CollectionState(), [{"k": "k1", "v": 1}, {"k": "k1", "v": 2}], _model())
        self.assertEqual(dict(state.instances), {"k1": {"k": "k1", "v": 2}})

    def test_existing_entry_is_replaced_not_merged(self) -> None:
        start = CollectionState({"k1": {"k": "k1", "v": 1, "extra": True}})
        state = upsert_instances(start, [{"k": "k1", "v": 2}], _model())
        self.assertEqual(dict(state.instances), {"k1": {"k": "k1", "v": 2}})

    def test_factory_runs_before_indexing(self) -> None:
        model = Model(
            "items",
            {"k": Field(primary=True)},
            factory=lambda record: {"k": str(record["k"]).lower()},
        )
        state = upsert_instances(CollectionState(), [{"k": "ABC"}], model)
        self.assertEqual(dict(state.instances), {"abc": {"k": "abc"}})

    def test_reducer_is_idempotent(self) -> None:
        records = [{"k": "k1", "v": 1}, {"k": "k2", "v": 2}]
        once = upsert_instances(CollectionState(), records, _model())
        twice = upsert_instances(once, records, _model())
        self.assertEqual(dict(once.instances), dict(twice.instances))

    def test_previous_state_is_not_mutated(self) -> None:
        start = CollectionState({"k0": {"k": "k0"}})
        upsert_instances(start, [{"k": "k1"}], _model())
        self.assertEqual(dict(start.instances), {"k0": {"k": "k0"}})

    def test_state_mapping_is_read_only(self) -> None:
        state = CollectionState({"k0": {"k": "k0"}})
        with self.assertRaises(TypeError):
            state.instances["k1"] = {"k": "k1"}

    def test_missing_primary_fails_on_reduce(self) -> None:
        model = Model("items", {"v": Field()})
        with self.assertRaises(ModelConfigurationError):
            upsert_instances(CollectionState(), [{"v": 1}], model)


class TestRemoveReducer(unittest.TestCase):
    def test_removes_matching_keys(self) -> None:
        r1, r2 = {"k": "k1"}, {"k": "k2"}
        state = remove_instances(CollectionState({"k1": r1, "k2": r2}), [{"k": "k1"}], _model())
        self.assertEqual(dict(state.instances), {"k2": r2})

    def test_unmatched_records_are_ignored(self) -> None:
        start = CollectionState({"k1": {"k": "k1"}})
        state = remove_instances(start, [{"k": "zz"}], _model())
        self.assertEqual(dict(state.instances), {"k1": {"k": "k1"}})

    def test_deleted_records_skip_factory(self) -> None:
        model = Model(
            "items",
            {"k": Field(primary=True)},
            factory=lambda record: {"k": str(record["k"]).lower()},
        )
        stored = upsert_instances(CollectionState(), [{"k": "ABC"}], model)
        state = remove_instances(stored, [{"k": "ABC"}], model)
        self.assertEqual(dict(state.instances), {"abc": {"k": "abc"}})


class TestActionReducers(unittest.TestCase):
    def test_create_read_update_insert_or_replace(self) -> None:
        for action_type in (Create, Read, Update):
            with self.subTest(action=action_type.__name__):
                action = action_type("a", model=_model())
                state = action.reducer(
                    CollectionState(),
                    Action(type="a", instances=({"k": "k1", "v": 1}, {"k": "k1", "v": 2})),
                )
                self.assertEqual(dict(state.instances), {"k1": {"k": "k1", "v": 2}})

    def test_delete_removes(self) -> None:
        action = Delete("d", model=_model())
        start = CollectionState({"k1": {"k": "k1"}, "k2": {"k": "k2"}})
        state = action.reducer(start, Action(type="d", instances=({"k": "k1"},)))
        self.assertEqual(list(state.instances), ["k2"])

    def test_reducer_without_model_fails(self) -> None:
        with self.assertRaises(ActionConfigurationError):
            Read("r").reducer(CollectionState(), Action(type="r"))


if __name__ == "__main__":
    unittest.main()
