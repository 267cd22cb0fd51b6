from listingforms.exceptions import (
    PackageError,
    SettingsError,
    TemplateError,
    TemplateStoreError,
)


def test_root_exception_hierarchy() -> None:
    assert issubclass(SettingsError, PackageError)
    assert issubclass(TemplateError, PackageError)
    assert issubclass(TemplateStoreError, PackageError)


def test_template_error_message_includes_template_id() -> None:
    assert str(TemplateError(message="bad rule")) == "bad rule"
    assert str(TemplateError(message="bad rule", template_id="house_template_v1")) == (
        "Invalid template 'house_template_v1': bad rule"
    )


def test_settings_error_includes_cause() -> None:
    assert str(SettingsError()) == "Failed to load settings"
    assert str(SettingsError(exc=ValueError("boom"))) == "Failed to load settings: boom"
