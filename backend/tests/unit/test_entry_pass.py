from uuid import uuid4

import pytest

from clubhub.clubs.domain import entry_pass
from clubhub.clubs.domain.exceptions import ValidationError


def test_issue_and_verify_carry_identity():
	event_id = uuid4()
	token = entry_pass.issue("user|with|pipes", event_id, issued_at=1_700_000_000, secret="s3cret")

	decoded = entry_pass.verify(token, secret="s3cret")

	assert decoded.user_id == "user|with|pipes"
	assert decoded.event_id == event_id
	assert decoded.issued_at == 1_700_000_000


def test_tampered_body_fails_signature():
	token = entry_pass.issue("bob", uuid4(), secret="s3cret")
	body, signature = token.split(".")
	forged_body = entry_pass.issue("mallory", uuid4(), secret="s3cret").split(".")[0]

	with pytest.raises(ValidationError) as excinfo:
		entry_pass.verify(f"{forged_body}.{signature}", secret="s3cret")
	assert excinfo.value.detail == "entry_pass_bad_signature"


def test_wrong_secret_fails_signature():
	token = entry_pass.issue("bob", uuid4(), secret="s3cret")

	with pytest.raises(ValidationError) as excinfo:
		entry_pass.verify(token, secret="other")
	assert excinfo.value.detail == "entry_pass_bad_signature"


@pytest.mark.parametrize("token", ["", "no-separator", ".deadbeef", "abc."])
def test_malformed_tokens(token):
	with pytest.raises(ValidationError) as excinfo:
		entry_pass.verify(token, secret="s3cret")
	assert excinfo.value.detail == "entry_pass_malformed"


def test_signed_garbage_body_is_malformed():
	body = entry_pass._b64url_encode(b"only-one-field")
	token = f"{body}.{entry_pass._sign(body, 's3cret')}"

	with pytest.raises(ValidationError) as excinfo:
		entry_pass.verify(token, secret="s3cret")
	assert excinfo.value.detail == "entry_pass_malformed"
