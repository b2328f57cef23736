"""
Casework Backend: Vacation Service
====================================

What:  Create, edit, list, approve and delete helper vacations.
How:   Loads the helper's stored vacations, hands them to the validators in
       casework.core.vacations and raises whatever error they return. The
       session is flushed here; get_db_session commits.
Who:   Called by the /api/vacations route handlers.

Rules applied on write:
    create → end after start, no start in the past, no overlap
    update → end not before start, no overlap (the edited vacation excluded)
    Overlap counts every vacation of the helper, approved or pending.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from casework.core.vacations import (
    VacationPeriod,
    validate_new_vacation,
    validate_vacation_update,
    vacation_days,
)
from casework.exceptions import CaseworkError, DatabaseError, NotFoundError
from casework.models.helper import Helper
from casework.models.vacation import Vacation
from casework.schemas.vacation import (
    HelperRef,
    VacationCreate,
    VacationFilter,
    VacationListResponse,
    VacationResponse,
    VacationUpdate,
)

logger = logging.getLogger(__name__)


def _to_response(
    vacation: Vacation,
    helper: Helper,
    substitute: Optional[Helper] = None,
) -> VacationResponse:
    return VacationResponse(
        id=vacation.id,
        helper=HelperRef.model_validate(helper),
        substitute=HelperRef.model_validate(substitute) if substitute is not None else None,
        from_date=vacation.from_date,
        to_date=vacation.to_date,
        days=vacation_days(vacation.from_date, vacation.to_date),
        approved=bool(vacation.approved),
        note=vacation.note,
        created_at=vacation.created_at,
        updated_at=vacation.updated_at,
    )


class VacationService:
    """
    Business logic for vacation requests.

    Validation errors (DateOrderError, PastDateError, OverlapError) and
    NotFoundError propagate unchanged; SQLAlchemy failures become DatabaseError.
    """

    async def _load(self, db: AsyncSession, vacation_id: int) -> Vacation:
        result = await db.execute(
            select(Vacation)
            .options(selectinload(Vacation.helper), selectinload(Vacation.substitute))
            .where(Vacation.id == vacation_id)
        )
        vacation = result.scalar_one_or_none()
        if vacation is None:
            raise NotFoundError(resource="vacation", resource_id=str(vacation_id))
        return vacation

    async def _helper_periods(self, db: AsyncSession, helper_id: int) -> List[VacationPeriod]:
        result = await db.execute(select(Vacation).where(Vacation.helper_id == helper_id))
        return [vacation.to_period() for vacation in result.scalars().all()]

    async def _get_helper(self, db: AsyncSession, helper_id: int, resource: str = "helper") -> Helper:
        helper = await db.get(Helper, helper_id)
        if helper is None:
            raise NotFoundError(resource=resource, resource_id=str(helper_id))
        return helper

    async def list_vacations(
        self,
        db: AsyncSession,
        filters: Optional[VacationFilter] = None,
    ) -> VacationListResponse:
        """
        List vacations, latest start date first.

        `year` keeps vacations lying entirely inside that calendar year.
        """
        filters = filters or VacationFilter()
        query = select(Vacation).options(
            selectinload(Vacation.helper),
            selectinload(Vacation.substitute),
        )

        if filters.helper_id is not None:
            query = query.where(Vacation.helper_id == filters.helper_id)
        if filters.status == "approved":
            query = query.where(Vacation.approved.is_(True))
        elif filters.status == "pending":
            query = query.where(Vacation.approved.is_(False))
        if filters.year is not None:
            query = query.where(
                Vacation.from_date >= date(filters.year, 1, 1),
                Vacation.to_date <= date(filters.year, 12, 31),
            )
        query = query.order_by(Vacation.from_date.desc())

        try:
            result = await db.execute(query)
            vacations = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing vacations: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve vacations. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return VacationListResponse(
            vacations=[_to_response(v, v.helper, v.substitute) for v in vacations],
            total_count=len(vacations),
        )

    async def get_vacation(self, db: AsyncSession, vacation_id: int) -> VacationResponse:
        try:
            vacation = await self._load(db, vacation_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching vacation %s: %s", vacation_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the vacation. Please try again.",
                context={"vacation_id": vacation_id},
            )
        return _to_response(vacation, vacation.helper, vacation.substitute)

    async def create_vacation(
        self,
        db: AsyncSession,
        data: VacationCreate,
        today: Optional[date] = None,
    ) -> VacationResponse:
        """
        Validate and store a new vacation request.

        New requests always start unapproved.

        Raises:
            NotFoundError: helper or substitute does not exist (→ 404)
            DateOrderError / PastDateError / OverlapError: rule violated (→ 400)
            DatabaseError: query or insert failed (→ 500)
        """
        try:
            helper = await self._get_helper(db, data.helper_id)
            substitute = None
            if data.substitute_id is not None:
                substitute = await self._get_helper(db, data.substitute_id, resource="substitute")

            existing = await self._helper_periods(db, helper.id)
            error = validate_new_vacation(
                helper.id, data.from_date, data.to_date, existing, today=today,
            )
            if error is not None:
                logger.info(
                    "Rejected vacation for helper %s (%s..%s): %s",
                    helper.id, data.from_date, data.to_date, error.code,
                )
                raise error

            vacation = Vacation(
                helper_id=helper.id,
                substitute_id=data.substitute_id,
                from_date=data.from_date,
                to_date=data.to_date,
                approved=False,
                note=data.note,
                created_by=data.created_by,
            )
            db.add(vacation)
            await db.flush()
            logger.info(
                "Vacation %s created for helper %s (%s..%s)",
                vacation.id, helper.id, data.from_date, data.to_date,
            )
            return _to_response(vacation, helper, substitute)

        except CaseworkError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating vacation: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the vacation. Please try again.",
                context={"helper_id": data.helper_id},
            )

    async def update_vacation(
        self,
        db: AsyncSession,
        vacation_id: int,
        data: VacationUpdate,
    ) -> VacationResponse:
        """
        Apply a partial update.

        When either date is supplied the merged period (new values over stored
        ones) is re-validated. Changed dates send the request back to pending approval.
        """
        fields = data.model_fields_set
        try:
            vacation = await self._load(db, vacation_id)

            new_from = data.from_date if data.from_date is not None else vacation.from_date
            new_to = data.to_date if data.to_date is not None else vacation.to_date

            dates_changed = (new_from, new_to) != (vacation.from_date, vacation.to_date)
            if data.from_date is not None or data.to_date is not None:
                existing = await self._helper_periods(db, vacation.helper_id)
                error = validate_vacation_update(
                    vacation.id, vacation.helper_id, new_from, new_to, existing,
                )
                if error is not None:
                    logger.info("Rejected update of vacation %s: %s", vacation.id, error.code)
                    raise error

            substitute = vacation.substitute
            if "substitute_id" in fields:
                substitute = None
                if data.substitute_id is not None:
                    substitute = await self._get_helper(db, data.substitute_id, resource="substitute")
                vacation.substitute_id = data.substitute_id
                vacation.substitute = substitute

            vacation.from_date = new_from
            vacation.to_date = new_to
            if dates_changed:
                vacation.approved = False
            if "note" in fields:
                vacation.note = data.note
            vacation.updated_at = datetime.now(timezone.utc)

            await db.flush()
            logger.info("Vacation %s updated", vacation.id)
            return _to_response(vacation, vacation.helper, substitute)

        except CaseworkError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating vacation %s: %s", vacation_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the vacation. Please try again.",
                context={"vacation_id": vacation_id},
            )

    async def approve_vacation(self, db: AsyncSession, vacation_id: int) -> VacationResponse:
        try:
            vacation = await self._load(db, vacation_id)
            vacation.approved = True
            vacation.updated_at = datetime.now(timezone.utc)
            await db.flush()
        except CaseworkError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error approving vacation %s: %s", vacation_id, str(e))
            raise DatabaseError(
                message="Could not approve the vacation. Please try again.",
                context={"vacation_id": vacation_id},
            )
        logger.info("Vacation %s approved", vacation_id)
        return _to_response(vacation, vacation.helper, vacation.substitute)

    async def delete_vacation(self, db: AsyncSession, vacation_id: int) -> None:
        try:
            vacation = await db.get(Vacation, vacation_id)
            if vacation is None:
                raise NotFoundError(resource="vacation", resource_id=str(vacation_id))
            await db.delete(vacation)
            await db.flush()
        except CaseworkError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting vacation %s: %s", vacation_id, str(e))
            raise DatabaseError(
                message="Could not delete the vacation. Please try again.",
                context={"vacation_id": vacation_id},
            )
        logger.info("Vacation %s deleted", vacation_id)


vacation_service = VacationService()
