"""Tests for model schema binding and composite indexing."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CollectionSync.core.fields import Field, NumericField, TextField
from CollectionSync.core.model import Model, PrimaryField, composite_index
from CollectionSync.errors import ModelConfigurationError


class TestModelFields(unittest.TestCase):
    def test_unnamed_fields_take_their_key(self) -> None:
        model = Model("users", {"id": NumericField(primary=True), "email": TextField()})
        self.assertEqual(model.fields["email"].name, "email")
        self.assertEqual(model.email.ilike("*@x").to_url_argument().as_pair(), ("email", "ilike.*@x"))
        self.assertIs(model["id"], model.id)

    def test_explicit_names_are_kept(self) -> None:
        model = Model("users", {"mail": TextField("email_address")})
        self.assertEqual(model.mail.name, "email_address")

    def test_sequence_of_named_fields(self) -> None:
        model = Model.create("users", [NumericField("id", primary=True), TextField("name")])
        self.assertEqual(list(model.fields), ["id", "name"])
        self.assertEqual(model.primary[0].name, "id")

    def test_sequence_entries_need_names(self) -> None:
        with self.assertRaises(ValueError):
            Model("users", [Field()])

    def test_non_field_declarations_are_rejected(self) -> None:
        with self.assertRaises(TypeError):
            Model("users", {"id": "numeric"})

    def test_primary_follows_declaration_order(self) -> None:
        model = Model("pairs", {"b": Field(primary=True), "x": Field(), "a": Field(primary=True)})
        self.assertEqual([component.name for component in model.primary], ["b", "a"])
        self.assertIsInstance(model.primary[0], PrimaryField)

    def test_unknown_attribute_raises(self) -> None:
        model = Model("users", {"id": Field(primary=True)})
        with self.assertRaises(AttributeError):
            model.missing

    def test_empty_model_name_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Model("  ")


class TestModelIndex(unittest.TestCase):
    def test_composite_index_joins_primary_values(self) -> None:
        model = Model("pairs", {"a": Field(primary=True), "b": Field(primary=True), "c": Field()})
        self.assertEqual(model.index({"a": "1", "b": "2", "c": "3"}), "1:2")

    def test_single_primary_is_unprefixed(self) -> None:
        model = Model("users", {"id": NumericField(primary=True)})
        self.assertEqual(model.index({"id": 7}), "7")

    def test_missing_primary_fails_lazily(self) -> None:
        model = Model("notes", {"body": TextField()})
        with self.assertRaises(ModelConfigurationError) as ctx:
            model.index({"body": "x"})
        self.assertIn("at least one primary field", str(ctx.exception))

    def test_custom_index_replaces_primary_lookup(self) -> None:
        model = Model("notes", {"body": TextField()}, index=lambda record: record["body"].upper())
        self.assertEqual(model.index({"body": "x"}), "X")

    def test_factory_defaults_to_identity(self) -> None:
        record = {"id": 1}
        self.assertIs(Model("users").factory(record), record)

    def test_custom_factory(self) -> None:
        model = Model("users", factory=lambda record: {**record, "seen": True})
        self.assertEqual(model.factory({"id": 1}), {"id": 1, "seen": True})

    def test_composite_index_function(self) -> None:
        primary = (PrimaryField("a", Field("a")),)
        self.assertEqual(composite_index({"a": 3}, primary), "3")
        with self.assertRaises(ModelConfigurationError):
            composite_index({"a": 3}, ())


if __name__ == "__main__":
    unittest.main()
