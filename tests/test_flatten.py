from sheetrelay.flatten import flatten


class TestFlatten:
    def test_flat_input_is_unchanged(self):
        assert flatten({"name": "Ann", "age": 30}) == {"name": "Ann", "age": 30}

    def test_nested_keys_joined_with_underscore(self):
        assert flatten({"a": {"b": 1}}) == {"a_b": 1}

    def test_deep_nesting(self):
        assert flatten({"a": {"b": {"c": True}}}) == {"a_b_c": True}

    def test_none_is_a_leaf(self):
        assert flatten({"a": None, "b": {"c": None}}) == {"a": None, "b_c": None}

    def test_lists_use_positions(self):
        assert flatten({"tags": ["x", "y"]}) == {"tags_0": "x", "tags_1": "y"}

    def test_empty_nested_mapping_contributes_nothing(self):
        assert flatten({"a": {}, "b": 2}) == {"b": 2}

    def test_preserves_insertion_order(self):
        result = flatten({"z": 1, "m": {"y": 2, "b": 3}, "a": 4})
        assert list(result) == ["z", "m_y", "m_b", "a"]
