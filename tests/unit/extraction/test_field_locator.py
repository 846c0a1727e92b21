"""Test depth-first field lookup."""
from invoice_tax.extraction.field_locator import as_list, find_all, find_first, pick_first_available


class TestFindFirst:
    def test_top_level(self):
        assert find_first({"Clave": "123"}, "Clave") == "123"

    def test_nested(self):
        tree = {"Factura": {"Encabezado": {"Clave": "abc"}}}
        assert find_first(tree, "Clave") == "abc"

    def test_inside_list(self):
        tree = {"Lineas": [{"Detalle": "x"}, {"Monto": "5"}]}
        assert find_first(tree, "Monto") == "5"

    def test_own_keys_before_children(self):
        tree = {"Child": {"Monto": "deep"}, "Monto": "shallow"}
        assert find_first(tree, "Monto") == "shallow"

    def test_not_found(self):
        assert find_first({"a": {"b": "c"}}, "Clave") is None

    def test_empty_value_is_found(self):
        assert find_first({"a": {"Clave": ""}}, "Clave") == ""

    def test_scalar_tree(self):
        assert find_first("text", "Clave") is None

    def test_returns_subtree(self):
        tree = {"Factura": {"ResumenFactura": {"TotalImpuesto": "13"}}}
        assert find_first(tree, "ResumenFactura") == {"TotalImpuesto": "13"}


class TestFindAll:
    def test_collects_every_occurrence(self):
        tree = {"a": {"Monto": "1"}, "b": [{"Monto": "2"}, {"c": {"Monto": "3"}}]}
        assert sorted(find_all(tree, "Monto")) == ["1", "2", "3"]

    def test_flattens_list_matches(self):
        tree = {"Resumen": {"TotalDesgloseImpuesto": [{"x": "1"}, {"x": "2"}]}}
        assert find_all(tree, "TotalDesgloseImpuesto") == [{"x": "1"}, {"x": "2"}]

    def test_none_found(self):
        assert find_all({"a": "b"}, "Monto") == []

    def test_nested_match_inside_match(self):
        tree = {"Impuesto": {"Impuesto": "inner"}}
        assert find_all(tree, "Impuesto") == [{"Impuesto": "inner"}, "inner"]


class TestPickFirstAvailable:
    def test_first_present_wins(self):
        assert pick_first_available({"B": "2", "A": "1"}, ["A", "B"]) == "1"

    def test_presence_not_truthiness(self):
        assert pick_first_available({"A": "", "B": "2"}, ["A", "B"]) == ""

    def test_direct_keys_only(self):
        assert pick_first_available({"x": {"A": "1"}}, ["A"]) is None

    def test_non_mapping(self):
        assert pick_first_available(None, ["A"]) is None


class TestAsList:
    def test_none(self):
        assert as_list(None) == []

    def test_empty_string(self):
        assert as_list("") == []

    def test_single(self):
        assert as_list({"a": 1}) == [{"a": 1}]

    def test_list(self):
        assert as_list([1, 2]) == [1, 2]
