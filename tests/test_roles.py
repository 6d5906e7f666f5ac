"""Tests for role definitions."""

from undercover.roles import ROLE_DESCRIPTIONS, Role, get_role_info


class TestRoles:
    """Test suite for Role enum and info."""

    def test_role_values(self):
        assert Role.CIVILIAN.value == "civilian"
        assert Role.UNDERCOVER.value == "undercover"
        assert Role.MR_WHITE.value == "mr_white"

    def test_every_role_is_described(self):
        for role in Role:
            assert role in ROLE_DESCRIPTIONS

    def test_role_info_fields(self):
        info = get_role_info(Role.UNDERCOVER)
        assert info["name"] == "Undercover"
        assert info["team"] == "undercover"
        assert info["has_word"] is True
        assert info["description"]

    def test_mr_white_has_no_word(self):
        assert get_role_info(Role.MR_WHITE)["has_word"] is False
        assert get_role_info(Role.CIVILIAN)["has_word"] is True

    def test_display_name(self):
        assert Role.MR_WHITE.display_name() == "Mr. White"
        assert Role.CIVILIAN.display_name() == "Civilian"

    def test_string_enum(self):
        """Roles compare equal to their stored string values."""
        assert Role("undercover") is Role.UNDERCOVER
        assert Role.CIVILIAN == "civilian"
