"""Discount editors: load, validate and save discounts through the admin API."""

import logging
import random
import string
import time
from typing import Any, Generic, TypeVar

import httpx

from storeadmin.admin.api_client import AdminApiClient, ApiError
from storeadmin.admin.catalog import SCOPE_CATALOGS, CatalogItem, resolve_catalog_items
from storeadmin.admin.debounce import Debouncer
from storeadmin.admin.discount_forms import (
    NEW_DISCOUNT_ID,
    AmountOffForm,
    BuyXGetYForm,
    FormValidationError,
    Redirect,
)
from storeadmin.core.config import settings
from storeadmin.models.discount import DiscountMethod, DiscountStatus, DiscountType
from storeadmin.services.discount_requirements import (
    Scope,
    decode_amount_off,
    decode_buy_x_get_y,
)

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_IN_USE = "This discount code is already in use"
CODE_CHECK_LIMIT = 10

FormT = TypeVar("FormT", AmountOffForm, BuyXGetYForm)


def random_code(length: int) -> str:
    return "".join(random.choices(CODE_ALPHABET, k=length))


def automatic_code() -> str:
    """Internal code for automatic discounts, which customers never type."""
    return f"AUTO_{int(time.time() * 1000)}_{random_code(6)}"


async def _scope_items(api: AdminApiClient, scope: Scope) -> list[CatalogItem]:
    if not scope.is_specific or not scope.ids:
        return []
    return await resolve_catalog_items(api, SCOPE_CATALOGS[scope.kind], scope.ids)


class DiscountEditor(Generic[FormT]):
    """Shared editor behaviour. Subclasses bind a discount type and its form."""

    discount_type: DiscountType
    route: str
    counterpart_route: str

    def __init__(self, api: AdminApiClient, code_check_delay: float | None = None):
        self.api = api
        self.discount_id = NEW_DISCOUNT_ID
        self.discount: dict[str, Any] | None = None
        self.form: FormT = self.new_form()
        self.errors: dict[str, str] = {}
        self._code_check = Debouncer(
            settings.CODE_CHECK_DEBOUNCE_SECONDS if code_check_delay is None else code_check_delay
        )

    @property
    def is_new(self) -> bool:
        return self.discount_id == NEW_DISCOUNT_ID

    def new_form(self) -> FormT:
        raise NotImplementedError

    async def populate(self, discount: dict[str, Any]) -> FormT:
        raise NotImplementedError

    def payload(self) -> dict[str, Any]:
        raise NotImplementedError

    async def load(self, discount_id: str) -> Redirect | None:
        """Load a discount into the editor.

        Returns:
            A ``Redirect`` to the other editor when the discount has the other
            type (the form is left untouched), else None.

        Raises:
            ApiError: If the discount cannot be fetched.
        """
        if discount_id == NEW_DISCOUNT_ID:
            self.discount_id = NEW_DISCOUNT_ID
            self.discount = None
            self.form = self.new_form()
            self.errors = {}
            return None

        data = await self.api.get(f"/api/discounts/{discount_id}")
        if data.get("type") != self.discount_type.value:
            return Redirect(self.counterpart_route.format(id=discount_id))

        self.form = await self.populate(data)
        self.discount = data
        self.discount_id = str(data["id"])
        self.errors = {}
        return None

    def validate(self) -> dict[str, str]:
        errors = self.form.validate()
        # A uniqueness failure from the live code check survives re-validation
        if self.errors.get("discountCode") == CODE_IN_USE and "discountCode" not in errors:
            errors["discountCode"] = CODE_IN_USE
        self.errors = errors
        return errors

    async def save(self) -> dict[str, Any]:
        """Validate, then POST (new) or PUT (existing) the full discount body.

        The editor's discount is replaced only once the server accepts the write.

        Raises:
            FormValidationError: If the form is invalid; no request is made.
            ApiError: If the server rejects the write.
        """
        errors = self.validate()
        if errors:
            raise FormValidationError(errors)

        body = self.payload()
        if self.is_new:
            saved = await self.api.post("/api/discounts", json=body)
            logger.info("Created discount %s", saved.get("code"))
        else:
            saved = await self.api.put(f"/api/discounts/{self.discount_id}", json=body)
        self.discount = saved
        self.discount_id = str(saved["id"])
        return saved

    async def delete(self) -> None:
        if self.is_new:
            return
        await self.api.delete(f"/api/discounts/{self.discount_id}")
        logger.info("Deleted discount %s", self.discount_id)
        self.discount = None
        self.discount_id = NEW_DISCOUNT_ID

    async def duplicate(self) -> dict[str, Any]:
        """Create a draft copy of the loaded discount and return it."""
        if self.discount is None:
            raise ValueError("No discount loaded")
        body = {
            key: value
            for key, value in self.discount.items()
            if key not in ("id", "createdAt", "updatedAt", "used")
        }
        body["title"] = f"Copy of {self.discount['title']}"
        body["code"] = f"{self.discount['code']}-COPY-{random_code(4)}"
        body["status"] = DiscountStatus.DRAFT.value
        return await self.api.post("/api/discounts", json=body)

    async def toggle_active(self) -> dict[str, Any]:
        """Flip the loaded discount between Active and Expired."""
        if self.discount is None:
            raise ValueError("No discount loaded")
        status = (
            DiscountStatus.EXPIRED
            if self.discount.get("status") == DiscountStatus.ACTIVE.value
            else DiscountStatus.ACTIVE
        )
        updated = await self.api.put(
            f"/api/discounts/{self.discount_id}", json={"status": status.value}
        )
        self.discount = updated
        self.form.status = DiscountStatus(updated["status"])
        return updated

    def generate_code(self) -> str:
        self.form.code = random_code(10)
        return self.form.code

    def on_code_change(self, code: str) -> None:
        """Set the code and schedule a debounced uniqueness check."""
        self.form.code = code.upper()
        self._code_check.schedule(self._check_code, self.form.code)

    async def wait_for_code_check(self) -> None:
        await self._code_check.wait()

    async def _check_code(self, code: str) -> None:
        stored_code = (self.discount or {}).get("code")
        if not code.strip() or code == stored_code:
            self._clear_code_in_use()
            return
        try:
            body = await self.api.get(
                "/api/discounts", params={"q": code, "limit": CODE_CHECK_LIMIT}
            )
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Code availability check failed for %s: %s", code, e)
            return

        taken = any(
            str(row.get("code", "")).upper() == code.upper()
            and str(row.get("id")) != self.discount_id
            for row in (body or {}).get("data", [])
        )
        if taken:
            self.errors["discountCode"] = CODE_IN_USE
        else:
            self._clear_code_in_use()

    def _clear_code_in_use(self) -> None:
        if self.errors.get("discountCode") == CODE_IN_USE:
            del self.errors["discountCode"]

    async def aclose(self) -> None:
        self._code_check.cancel()


class AmountOffDiscountEditor(DiscountEditor[AmountOffForm]):
    discount_type = DiscountType.AMOUNT_OFF_PRODUCTS
    route = "/discounts/{id}"
    counterpart_route = "/discounts/buy-x-get-y/{id}"

    def new_form(self) -> AmountOffForm:
        return AmountOffForm()

    async def populate(self, discount: dict[str, Any]) -> AmountOffForm:
        requirements = decode_amount_off(discount.get("requirements"))
        items = await _scope_items(self.api, requirements.applies_to)
        return AmountOffForm.from_discount(discount, requirements, items)

    def payload(self) -> dict[str, Any]:
        return self.form.to_payload()


class BuyXGetYDiscountEditor(DiscountEditor[BuyXGetYForm]):
    discount_type = DiscountType.BUY_X_GET_Y
    route = "/discounts/buy-x-get-y/{id}"
    counterpart_route = "/discounts/{id}"

    def new_form(self) -> BuyXGetYForm:
        return BuyXGetYForm()

    async def populate(self, discount: dict[str, Any]) -> BuyXGetYForm:
        requirements = decode_buy_x_get_y(discount.get("requirements"))
        buys_items = await _scope_items(self.api, requirements.buys.scope)
        gets_items = await _scope_items(self.api, requirements.gets.scope)
        return BuyXGetYForm.from_discount(discount, requirements, buys_items, gets_items)

    def payload(self) -> dict[str, Any]:
        if self.form.method == DiscountMethod.AUTOMATIC:
            stored = (self.discount or {}).get("code")
            code = automatic_code() if self.is_new or not stored else stored
        else:
            code = self.form.code.strip().upper()
        return self.form.to_payload(code)
