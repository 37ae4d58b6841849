"""Form store — Redis-backed persistence for forms and their answer sets.

Key layout (under the configured prefix):
    form:{id}              JSON of the Form record
    form:{id}:answers      list of AnswerSet JSON, oldest first
    owner:{email}:forms    set of form ids owned by a user

Attaching answers and deleting a form each run as one Lua script, so an
answer set can never be pushed for a form that is being deleted.
"""

from typing import Optional

import structlog

from formkit.config import get_settings
from formkit.models.forms import AnswerSet, Form

logger = structlog.get_logger()

# KEYS: form, answers. ARGV: answer set JSON. Returns -1 when the form is gone.
PUSH_ANSWER_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return -1
end
return redis.call('RPUSH', KEYS[2], ARGV[1])
"""

# KEYS: form, answers, owner index. ARGV: form id.
# Returns the number of answer sets removed, -1 when the form is gone.
DELETE_FORM_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return -1
end
local count = redis.call('LLEN', KEYS[2])
redis.call('DEL', KEYS[1], KEYS[2])
redis.call('SREM', KEYS[3], ARGV[1])
return count
"""


class FormNotFound(LookupError):
    """Raised when an operation needs a form that is not stored."""

    def __init__(self, form_id: str):
        super().__init__(f"Form {form_id} not found")
        self.form_id = form_id


class FormStore:
    """Manages form and answer records in Redis."""

    def __init__(self, redis_client, prefix: Optional[str] = None):
        self.redis = redis_client
        self._prefix = prefix if prefix is not None else get_settings().KEY_PREFIX
        self._push_answer = redis_client.register_script(PUSH_ANSWER_SCRIPT)
        self._delete_form = redis_client.register_script(DELETE_FORM_SCRIPT)

    def _form_key(self, form_id: str) -> str:
        return f"{self._prefix}form:{form_id}"

    def _answers_key(self, form_id: str) -> str:
        return f"{self._prefix}form:{form_id}:answers"

    def _owner_key(self, owner_email: str) -> str:
        return f"{self._prefix}owner:{owner_email.lower()}:forms"

    # ── Forms ──

    async def create_form(self, form: Form) -> None:
        """Store a normalized form and index it under its owner."""
        await self.redis.set(self._form_key(form.id), form.model_dump_json(by_alias=True))
        await self.redis.sadd(self._owner_key(form.owner_email), form.id)
        logger.info("form_created", form_id=form.id, owner=form.owner_email, field_count=len(form.fields))

    async def get_form(self, form_id: str) -> Optional[Form]:
        data = await self.redis.get(self._form_key(form_id))
        if data is None:
            return None
        return Form.model_validate_json(data)

    async def list_forms(self, owner_email: str) -> list[Form]:
        """Forms owned by a user, newest first."""
        form_ids = await self.redis.smembers(self._owner_key(owner_email))
        forms = []
        for form_id in form_ids:
            form = await self.get_form(form_id)
            if form is not None:
                forms.append(form)
        return sorted(forms, key=lambda f: f.created_at, reverse=True)

    async def delete_form(self, form_id: str) -> int:
        """Delete a form together with every answer set submitted to it.

        The form, its answer list and its owner index entry are removed in
        one script, so no answer set can be attached in between.

        Returns:
            Number of answer sets deleted
        """
        form = await self.get_form(form_id)
        if form is None:
            raise FormNotFound(form_id)

        answer_count = await self._delete_form(
            keys=[self._form_key(form_id), self._answers_key(form_id), self._owner_key(form.owner_email)],
            args=[form_id],
        )
        if answer_count < 0:
            # Deleted by someone else since the read above
            raise FormNotFound(form_id)

        logger.info("form_deleted", form_id=form_id, owner=form.owner_email)
        logger.info("answers_cascade_deleted", form_id=form_id, count=answer_count)
        return answer_count

    # ── Answer sets ──

    async def add_answer_set(self, answer_set: AnswerSet) -> None:
        """Append an accepted answer set to its form, if the form still exists."""
        pushed = await self._push_answer(
            keys=[self._form_key(answer_set.form_id), self._answers_key(answer_set.form_id)],
            args=[answer_set.model_dump_json(by_alias=True)],
        )
        if pushed < 0:
            raise FormNotFound(answer_set.form_id)

        logger.info("answer_set_stored", form_id=answer_set.form_id, answer_set_id=answer_set.id)

    async def list_answer_sets(self, form_id: str, offset: int = 0, limit: int = 100) -> list[AnswerSet]:
        rows = await self.redis.lrange(self._answers_key(form_id), offset, offset + limit - 1)
        return [AnswerSet.model_validate_json(row) for row in rows]

    async def count_answer_sets(self, form_id: str) -> int:
        return await self.redis.llen(self._answers_key(form_id))
