"""
Catalog services.

One service per collection on top of a FailoverRepository. Services validate
create payloads, run the filters the client needs, and carry the submission
and comment lifecycles. Filters run over ``get_all``; the catalog is small.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from SharedStore.managers import (
    Record, RecordManager, FailoverRepository, DocumentRecordStore, utcnow, isoformat, strip_readonly,
)
from SharedStore.managers.base import Clock
from SharedStore.services.base import RestRecordStore

from agroguard.config import Settings
from agroguard.constants import collections
from agroguard.exceptions import (
    CatalogValidationError, InvalidTransitionError, PersistenceError,
)
from agroguard.schemas.analysis import AnalysisResult
from agroguard.schemas.catalog import (
    CamelModel, DiseaseCreate, ChemicalCreate, MarketCreate, DiseaseCategoryCreate,
    PendingSubmissionCreate, CommentCreate, SubmissionStatus, CommentStatus,
    describe_validation_error,
)

logger = logging.getLogger(__name__)


class CollectionService:
    collection: str
    entity: str
    create_schema: type[CamelModel]
    # status -> statuses it may move to; None when the collection has no lifecycle
    transitions: Optional[dict[str, set[str]]] = None
    initial_status: Optional[str] = None

    def __init__(self, repository: FailoverRepository, *, clock: Clock = utcnow):
        self.repository = repository
        self.clock = clock

    def now(self) -> str:
        return isoformat(self.clock())

    def validate(self, payload: dict) -> dict:
        """Validate a create payload and return the document to store, defaults filled"""
        try:
            model = self.create_schema.model_validate(payload)
        except ValidationError as e:
            raise CatalogValidationError(describe_validation_error(e)) from e
        return model.to_document()

    async def get_all(self) -> list[Record]:
        return await self.repository.get_all(self.collection)

    async def get_by_id(self, uid: str) -> Optional[Record]:
        return await self.repository.get_by_id(self.collection, uid)

    async def create(self, payload: dict) -> Optional[str]:
        document = self.validate(payload)
        uid = await self.repository.create(self.collection, document)
        if uid:
            logger.info(f"✅ {self.entity} created: {uid}")
        return uid

    def check_transition(self, record: Record, target: str):
        current = record.get("status") or self.initial_status
        if target not in self.transitions.get(current, set()):
            raise InvalidTransitionError(self.entity, current, target)

    async def update(self, uid: str, partial: dict) -> bool:
        """Merge ``partial`` into a record. A ``status`` change must follow the lifecycle."""
        partial = strip_readonly(partial)
        target = partial.get("status")
        if self.transitions is not None and target is not None:
            record = await self.get_by_id(uid)
            if record is None:
                return False
            if target != (record.get("status") or self.initial_status):
                self.check_transition(record, target)
        return await self.repository.update(self.collection, uid, partial)

    async def delete(self, uid: str) -> bool:
        return await self.repository.delete(self.collection, uid)

    async def filter(self, predicate) -> list[Record]:
        return [record for record in await self.get_all() if predicate(record)]


def _lower(value) -> str:
    return str(value or "").lower()


class DiseaseService(CollectionService):
    collection = collections.DISEASES
    entity = "Disease"
    create_schema = DiseaseCreate

    async def search_by_crop(self, crop_type: str) -> list[Record]:
        needle = crop_type.lower()
        return await self.filter(lambda d: needle in _lower(d.get("cropType")))

    async def get_featured(self) -> list[Record]:
        return await self.filter(lambda d: d.get("featured") is True)

    async def get_by_category(self, category_id: str) -> list[Record]:
        return await self.filter(lambda d: d.get("categoryId") == category_id)


class DiseaseCategoryService(CollectionService):
    collection = collections.DISEASE_CATEGORIES
    entity = "Disease category"
    create_schema = DiseaseCategoryCreate

    def __init__(self, repository: FailoverRepository, *, diseases: DiseaseService, clock: Clock = utcnow):
        super().__init__(repository, clock=clock)
        self.diseases = diseases

    async def get_diseases(self, category_id: str) -> list[Record]:
        return await self.diseases.get_by_category(category_id)


class ChemicalService(CollectionService):
    collection = collections.CHEMICALS
    entity = "Chemical"
    create_schema = ChemicalCreate

    async def get_by_type(self, chemical_type: str) -> list[Record]:
        wanted = chemical_type.lower()
        return await self.filter(lambda c: _lower(c.get("type")) == wanted)


class MarketService(CollectionService):
    collection = collections.MARKETS
    entity = "Market"
    create_schema = MarketCreate

    async def get_by_location(self, location: str) -> list[Record]:
        needle = location.lower()
        return await self.filter(
            lambda m: needle in _lower(m.get("location")) or needle in _lower(m.get("region"))
        )

    async def get_chemicals(self, market_id: str) -> Optional[list[dict]]:
        """Chemicals listed by a market, or None when the market does not exist"""
        market = await self.get_by_id(market_id)
        if market is None:
            return None
        return market.get("chemicals") or []

    async def get_by_chemical_availability(self, chemical_id: str) -> list[Record]:
        return await self.filter(
            lambda m: any(
                c.get("chemicalId") == chemical_id and c.get("available")
                for c in m.get("chemicals") or []
            )
        )

    async def update_chemical(
        self,
        market_id: str,
        chemical_id: str,
        price: Optional[float] = None,
        available: Optional[bool] = None,
    ) -> bool:
        market = await self.get_by_id(market_id)
        if market is None:
            return False

        chemicals = [dict(c) for c in market.get("chemicals") or []]
        for chemical in chemicals:
            if chemical.get("chemicalId") == chemical_id:
                break
        else:
            return False

        if price is not None:
            chemical["price"] = price
        if available is not None:
            chemical["available"] = available
        chemical["lastUpdated"] = self.clock().date().isoformat()

        return await self.repository.update(self.collection, market_id, {"chemicals": chemicals})


# pending -> approved | rejected, both terminal
SUBMISSION_TRANSITIONS = {
    SubmissionStatus.PENDING.value: {SubmissionStatus.APPROVED.value, SubmissionStatus.REJECTED.value},
    SubmissionStatus.APPROVED.value: set(),
    SubmissionStatus.REJECTED.value: set(),
}


class PendingSubmissionService(CollectionService):
    collection = collections.PENDING_DISEASES
    entity = "Pending disease"
    create_schema = PendingSubmissionCreate
    transitions = SUBMISSION_TRANSITIONS
    initial_status = SubmissionStatus.PENDING.value

    def __init__(self, repository: FailoverRepository, *, diseases: DiseaseService, clock: Clock = utcnow):
        super().__init__(repository, clock=clock)
        self.diseases = diseases

    def validate(self, payload: dict) -> dict:
        return {**super().validate(payload), "status": SubmissionStatus.PENDING.value}

    async def get_by_status(self, status: str) -> list[Record]:
        return await self.filter(lambda s: s.get("status") == status)

    async def get_by_user(self, user_id: str) -> list[Record]:
        return await self.filter(lambda s: s.get("userId") == user_id)

    async def submit_from_analysis(
        self,
        result: AnalysisResult,
        user_id: str,
        image_url: str,
        location: str = "",
    ) -> Optional[str]:
        """Queue a detected disease for expert review. Healthy verdicts are not queued."""
        if not result.detected:
            return None
        return await self.create({
            "userId": user_id,
            "imageUrl": image_url,
            "location": location or "",
            "detectedDisease": result.disease_name,
            "confidence": result.confidence,
            "cropType": result.affected_crops[0] if result.affected_crops else None,
            "description": result.description,
            "symptoms": result.symptoms,
        })

    @staticmethod
    def default_disease(submission: Record) -> dict:
        crop_type = submission.get("cropType") or "Unknown"
        return {
            "name": {"en": f"{crop_type} Disease", "om": "", "am": ""},
            "cropType": crop_type,
            "images": [submission["imageUrl"]] if submission.get("imageUrl") else [],
            "symptoms": {"en": submission.get("symptoms") or [], "om": [], "am": []},
            "treatments": [],
        }

    async def approve(self, uid: str, disease_data: Optional[dict] = None) -> Optional[str]:
        """
        Promote a pending submission to a Disease.

        Returns the new Disease id, or None when the submission does not exist.
        The two writes are not atomic: if stamping the submission fails the
        Disease is kept and the submission stays pending.
        """
        submission = await self.get_by_id(uid)
        if submission is None:
            return None
        self.check_transition(submission, SubmissionStatus.APPROVED.value)

        disease_id = await self.diseases.create(disease_data or self.default_disease(submission))
        if not disease_id:
            raise PersistenceError("create", "disease")

        stamped = await self.repository.update(self.collection, uid, {
            "status": SubmissionStatus.APPROVED.value,
            "approvedAt": self.now(),
            "approvedDiseaseId": disease_id,
        })
        if not stamped:
            logger.error(f"❌ Disease {disease_id} created but submission {uid} could not be marked approved")
        return disease_id

    async def reject(self, uid: str, reason: Optional[str] = None) -> Optional[bool]:
        """Returns None when the submission does not exist, otherwise whether the stamp was stored"""
        submission = await self.get_by_id(uid)
        if submission is None:
            return None
        self.check_transition(submission, SubmissionStatus.REJECTED.value)

        return await self.repository.update(self.collection, uid, {
            "status": SubmissionStatus.REJECTED.value,
            "rejectedAt": self.now(),
            "rejectionReason": reason or "No reason provided",
        })


# unread -> read -> replied, and unread -> replied
COMMENT_TRANSITIONS = {
    CommentStatus.UNREAD.value: {CommentStatus.READ.value, CommentStatus.REPLIED.value},
    CommentStatus.READ.value: {CommentStatus.REPLIED.value},
    CommentStatus.REPLIED.value: set(),
}


class CommentService(CollectionService):
    collection = collections.COMMENTS
    entity = "Comment"
    create_schema = CommentCreate
    transitions = COMMENT_TRANSITIONS
    initial_status = CommentStatus.UNREAD.value

    def validate(self, payload: dict) -> dict:
        return {**super().validate(payload), "status": CommentStatus.UNREAD.value}

    async def get_by_status(self, status: str) -> list[Record]:
        return await self.filter(lambda c: c.get("status") == status)

    async def get_by_category(self, category: str) -> list[Record]:
        return await self.filter(lambda c: c.get("category") == category)

    async def get_by_user(self, user_id: str) -> list[Record]:
        return await self.filter(lambda c: c.get("userId") == user_id)

    async def _transition(self, uid: str, target: CommentStatus, fields: dict) -> Optional[bool]:
        comment = await self.get_by_id(uid)
        if comment is None:
            return None

        self.check_transition(comment, target.value)

        return await self.repository.update(self.collection, uid, {"status": target.value, **fields})

    async def mark_as_read(self, uid: str) -> Optional[bool]:
        return await self._transition(uid, CommentStatus.READ, {"readAt": self.now()})

    async def reply(self, uid: str, reply: str, replied_by: Optional[str] = None) -> Optional[bool]:
        if not reply or not reply.strip():
            raise CatalogValidationError("reply: Reply message is required")
        return await self._transition(uid, CommentStatus.REPLIED, {
            "reply": reply.strip(),
            "repliedBy": replied_by or "Admin",
            "repliedAt": self.now(),
        })


class Catalog:
    """All collection services over one repository."""

    def __init__(self, repository: FailoverRepository, *, clock: Clock = utcnow):
        self.repository = repository
        self.diseases = DiseaseService(repository, clock=clock)
        self.categories = DiseaseCategoryService(repository, diseases=self.diseases, clock=clock)
        self.chemicals = ChemicalService(repository, clock=clock)
        self.markets = MarketService(repository, clock=clock)
        self.pending = PendingSubmissionService(repository, diseases=self.diseases, clock=clock)
        self.comments = CommentService(repository, clock=clock)

    async def close(self):
        """Release the connections held by the repository stores"""
        for store in (self.repository.primary, self.repository.fallback):
            if isinstance(store, DocumentRecordStore):
                await store.close()
            elif isinstance(store, RecordManager):
                await store.engine.dispose()


def build_failover_catalog(settings: Settings) -> Catalog:
    """
    Catalog as seen by clients: the document database first, the REST
    fallback service when the database denies access. Without a configured
    database the REST service is the only store.
    """
    rest = RestRecordStore(settings.FALLBACK_API_URL, timeout=settings.FALLBACK_API_TIMEOUT)
    if settings.MONGODB_URI:
        primary = DocumentRecordStore.from_uri(settings.MONGODB_URI, settings.MONGODB_DB)
        return Catalog(FailoverRepository(primary, fallback=rest))

    logger.warning("⚠️  MONGODB_URI not configured, catalog will use the REST service only")
    return Catalog(FailoverRepository(rest))
