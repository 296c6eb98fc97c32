"""Import mutation root definitions."""

from __future__ import annotations

import graphene

from ..services import cancel_job, require_import_access
from ..services.errors import ImportServiceError
from .types import CancelProductImportJobPayloadType


class CancelProductImportJobMutation(graphene.Mutation):
    class Arguments:
        job_id = graphene.ID(required=True)
        reason = graphene.String()

    Output = CancelProductImportJobPayloadType

    def mutate(self, info, job_id, reason=None):
        user = getattr(info.context, "user", None)
        user_id = require_import_access(user, write=True)
        try:
            job = cancel_job(job_id, reason or "", user_id=user_id)
        except ImportServiceError as exc:
            return {"ok": False, "job": None, "error": exc.message, "code": exc.code}
        return {"ok": True, "job": job, "error": None, "code": None}


class ImportMutations(graphene.ObjectType):
    cancel_product_import_job = CancelProductImportJobMutation.Field()
