from portal.schemas import LoginForm, SignupForm, validate


def test_signup_valid_payload_strips_unknown_fields():
    form, errors = validate(
        SignupForm,
        {"name": "Ann", "email": "ann@example.com", "password": "longenough1", "user_type": "admin"},
    )
    assert errors == []
    assert form.name == "Ann"
    assert not hasattr(form, "user_type")


def test_signup_reports_every_failing_field():
    form, errors = validate(SignupForm, {"name": "x" * 31, "email": "not-an-email", "password": "short"})
    assert form is None
    assert errors == [
        '"name" length must be less than or equal to 30 characters long',
        '"email" must be a valid email',
        '"password" length must be at least 8 characters long',
    ]


def test_signup_missing_and_empty_fields():
    _, errors = validate(SignupForm, {"name": "", "password": "longenough1"})
    assert '"name" is not allowed to be empty' in errors
    assert '"email" is required' in errors


def test_password_upper_bound():
    _, errors = validate(LoginForm, {"email": "ann@example.com", "password": "p" * 65})
    assert errors == ['"password" length must be less than or equal to 64 characters long']

    form, errors = validate(LoginForm, {"email": "ann@example.com", "password": "p" * 64})
    assert errors == []
    assert form.password == "p" * 64
