"""Tests for bethyw.merge module."""

from bethyw.merge import merge_into, prefer_incoming


class TestMergeInto:
    """Tests for the shared associative merge."""

    def test_incoming_wins_on_collision(self) -> None:
        """Colliding keys take the incoming value by default."""
        target = {1999: 10.0}
        merge_into(target, {1999: 20.0, 2000: 30.0})
        assert target == {1999: 20.0, 2000: 30.0}

    def test_keys_only_in_target_are_kept(self) -> None:
        """Test that keys missing from the incoming mapping survive."""
        target = {"eng": "Cardiff", "cym": "Caerdydd"}
        merge_into(target, {"eng": "City of Cardiff"})
        assert target == {"eng": "City of Cardiff", "cym": "Caerdydd"}

    def test_custom_resolver_receives_existing_then_incoming(self) -> None:
        """Resolver is called as resolve(existing, incoming)."""
        calls = []

        def resolve(existing: int, incoming: int) -> int:
            calls.append((existing, incoming))
            return existing + incoming

        target = {"a": 1}
        merge_into(target, {"a": 2, "b": 3}, resolve)

        assert target == {"a": 3, "b": 3}
        assert calls == [(1, 2)]

    def test_returns_target(self) -> None:
        """Test that the merged mapping itself is returned."""
        target: dict[str, int] = {}
        assert merge_into(target, {"x": 1}) is target

    def test_prefer_incoming(self) -> None:
        """Test the default collision policy."""
        assert prefer_incoming("old", "new") == "new"
