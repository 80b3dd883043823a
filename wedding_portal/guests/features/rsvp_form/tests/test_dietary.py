from wedding_portal.guests.features.rsvp_form.dietary import (
    NO_RESTRICTIONS_MARKER,
    decode_restrictions,
    display_name,
    encode_restrictions,
    is_option_selected,
    toggle_option,
)


def test_checking_none_clears_other_selections():
    selection = ["Vegan", "Gluten-Free"]

    assert toggle_option(selection, "None", True) == [NO_RESTRICTIONS_MARKER]


def test_checking_an_option_clears_none():
    selection = [NO_RESTRICTIONS_MARKER]

    assert toggle_option(selection, "Vegan", True) == ["Vegan"]


def test_unchecking_options():
    assert toggle_option(["Vegan", "Nut Allergy"], "Vegan", False) == ["Nut Allergy"]
    assert toggle_option([NO_RESTRICTIONS_MARKER], "None", False) == []


def test_checking_twice_does_not_duplicate():
    assert toggle_option(["Vegan"], "Vegan", True) == ["Vegan"]


def test_is_option_selected():
    assert is_option_selected([NO_RESTRICTIONS_MARKER], "None")
    assert not is_option_selected(["Vegan"], "None")
    assert is_option_selected(["Vegan"], "Vegan")


def test_encode_uses_lower_case_tags():
    assert encode_restrictions(["Gluten-Free"]) == ["gluten_free"]
    assert encode_restrictions(["Nut Allergy", "Dairy-Free"]) == ["nut_allergy", "dairy_free"]


def test_encode_none_answer_is_distinct_from_unanswered():
    assert encode_restrictions([NO_RESTRICTIONS_MARKER]) == ["none"]
    assert encode_restrictions([]) == []


def test_decode_round_trips_known_options():
    assert decode_restrictions(["gluten_free", "vegan"]) == ["Gluten-Free", "Vegan"]
    assert decode_restrictions(["none"]) == [NO_RESTRICTIONS_MARKER]


def test_decode_passes_unknown_tags_through():
    assert decode_restrictions(["halal"]) == ["halal"]


def test_display_name():
    assert display_name("gluten_free") == "Gluten Free"
    assert display_name("vegan") == "Vegan"
