import pytest

from conftest import OWNER


def test_defaults_per_kind(category_service):
    expense = [c.name for c in category_service.for_kind(OWNER, "expense")]
    income = [c.name for c in category_service.for_kind(OWNER, "income")]

    assert expense == ["Food", "Transport", "Shopping", "Bills", "Entertainment", "Other"]
    assert income == ["Salary", "Business", "Investments", "Gifts", "Other Income"]


def test_custom_categories_follow_defaults(category_service):
    category_service.add_custom(OWNER, "  Pets ")

    names = [c.name for c in category_service.for_kind(OWNER, "expense")]
    assert names[-1] == "Pets"
    assert category_service.for_kind(OWNER, "income")[-1].is_custom


def test_custom_categories_are_per_owner(category_service):
    category_service.add_custom(OWNER, "Pets")

    assert category_service.get_custom("user-2") == []


@pytest.mark.parametrize("name", ["", "   ", "Food", "Other Income"])
def test_rejects_empty_and_duplicate_defaults(category_service, name):
    with pytest.raises(ValueError):
        category_service.add_custom(OWNER, name)


def test_rejects_duplicate_custom(category_service):
    category_service.add_custom(OWNER, "Pets")

    with pytest.raises(ValueError, match="already exists"):
        category_service.add_custom(OWNER, "Pets")


def test_remove_custom(category_service):
    category_service.add_custom(OWNER, "Pets")
    category_service.remove_custom(OWNER, "Pets")

    assert category_service.get_custom(OWNER) == []
    with pytest.raises(ValueError):
        category_service.remove_custom(OWNER, "Pets")
