"""Tests for field builders and predicate wire form."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CollectionSync.core.fields import Field, NumericField, TextField
from CollectionSync.core.predicate import Predicate, RequestArgument


class TestFieldPredicates(unittest.TestCase):
    def test_equals_builds_eq_argument(self) -> None:
        predicate = Field("x").equals(5)
        self.assertEqual(predicate, Predicate(field="x", operator="eq", value="5"))
        self.assertEqual(predicate.to_url_argument(), RequestArgument("x", "eq.5"))

    def test_in_joins_values_with_commas(self) -> None:
        argument = Field("id").in_([1, 2, 3]).to_url_argument()
        self.assertEqual(argument, RequestArgument("id", "in.1,2,3"))

    def test_in_does_not_escape_commas(self) -> None:
        argument = Field("tag").in_(["a,b", "c"]).to_url_argument()
        self.assertEqual(argument.value, "in.a,b,c")

    def test_is_maps_none_to_null(self) -> None:
        self.assertEqual(Field("deleted_at").is_(None).to_url_argument().value, "is.null")

    def test_is_serializes_booleans_lowercase(self) -> None:
        self.assertEqual(Field("done").is_(True).value, "true")
        self.assertEqual(Field("done").is_(False).value, "false")

    def test_text_operators(self) -> None:
        title = TextField("title")
        self.assertEqual(title.like("A*").to_url_argument().value, "like.A*")
        self.assertEqual(title.ilike("*a*").to_url_argument().value, "ilike.*a*")
        self.assertEqual(title.full_text_search("cat").to_url_argument().value, "@@.cat")

    def test_numeric_operators(self) -> None:
        age = NumericField("age")
        self.assertEqual(age.greater_than(1).operator, "gt")
        self.assertEqual(age.less_than(1).operator, "lt")
        self.assertEqual(age.greater_than_or_equal_to(1).operator, "gte")
        self.assertEqual(age.less_than_or_equal_to(1).operator, "lte")

    def test_ordering_tokens(self) -> None:
        name = Field("name")
        self.assertEqual(name.order_ascending(), "name.asc")
        self.assertEqual(name.order_descending(), "name.desc")

    def test_unnamed_field_cannot_build_predicates(self) -> None:
        with self.assertRaises(ValueError):
            Field().equals(1)


class TestFieldNegation(unittest.TestCase):
    def test_not_prefixes_operator(self) -> None:
        argument = Field("x").not_.equals(5).to_url_argument()
        self.assertEqual(argument, RequestArgument("x", "not.eq.5"))

    def test_double_negation_returns_original(self) -> None:
        field = TextField("title", primary=True)
        self.assertIs(field.not_.not_, field)
        self.assertEqual(field.not_.not_.like("a").operator, "like")

    def test_negated_twin_shares_identity(self) -> None:
        field = NumericField("age", primary=True)
        self.assertIsInstance(field.not_, NumericField)
        self.assertEqual(field.not_.name, "age")
        self.assertTrue(field.not_.primary)
        self.assertTrue(field.not_.negated)
        self.assertFalse(field.negated)

    def test_twin_is_built_once(self) -> None:
        field = Field("x")
        self.assertIs(field.not_, field.not_)

    def test_negated_subtype_operators(self) -> None:
        self.assertEqual(TextField("t").not_.ilike("a").operator, "not.ilike")
        self.assertEqual(NumericField("n").not_.greater_than(3).to_url_argument().value, "not.gt.3")
        self.assertEqual(Field("f").not_.in_(["a", "b"]).to_url_argument().value, "not.in.a,b")
        self.assertEqual(Field("f").not_.is_(None).to_url_argument().value, "not.is.null")

    def test_named_keeps_polarity_and_type(self) -> None:
        bound = TextField(primary=True).named("title")
        self.assertIsInstance(bound, TextField)
        self.assertEqual(bound.name, "title")
        self.assertTrue(bound.primary)
        self.assertFalse(bound.negated)

        negated = TextField().not_.named("title")
        self.assertTrue(negated.negated)
        self.assertEqual(negated.like("a").operator, "not.like")


if __name__ == "__main__":
    unittest.main()
