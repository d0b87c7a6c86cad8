"""
clients/base.py
----------------

Operation table and response handling shared by the synchronous and
asynchronous Recurly clients.

Every public operation only describes the call (verb, path, payload,
expected model) as a :class:`RecurlyRequest` and hands it to
``self._call``. The synchronous client executes it immediately; the
asynchronous client returns a coroutine, so the same operation reads
``client.get_account(code)`` or ``await client.get_account(code)``.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, Union
from urllib.parse import quote

from recurly_xml.core.auth import build_auth_headers, get_base_url
from recurly_xml.core.config import get_settings
from recurly_xml.exceptions import (
    NotFoundException,
    RecurlyException,
    RequestException,
    TransactionException,
)
from recurly_xml.logging_config import hide_xml_node_values, log_http_request, logger
from recurly_xml.schemas.account import ACCOUNTS_RESOURCE, BILLING_INFO_RESOURCE, Account, BillingInfo
from recurly_xml.schemas.base import RecurlyObject
from recurly_xml.schemas.coupon import COUPONS_RESOURCE, Coupon
from recurly_xml.schemas.errors import ErrorMessage404, Errors
from recurly_xml.schemas.invoice import INVOICES_RESOURCE, TRANSACTIONS_RESOURCE, Invoice, Transaction
from recurly_xml.schemas.params import PagingParams, TransactionFilter
from recurly_xml.schemas.plan import ADD_ONS_RESOURCE, PLANS_RESOURCE, AddOn, Plan
from recurly_xml.schemas.subscription import (
    SUBSCRIPTIONS_RESOURCE,
    Subscription,
    SubscriptionState,
    SubscriptionUpdate,
)

FETCH_RESOURCE = "/recurly_js/result"
ERROR_MESSAGE_TEMPLATE = "error code {status} ({detail})"


@dataclass
class RecurlyRequest:
    """One API call, ready to be sent by a transport."""

    method: str
    url: str
    model: Optional[Type[RecurlyObject]] = None
    payload: Optional[RecurlyObject] = None
    params: Optional[Dict[str, Any]] = None
    many: bool = False


def _segment(value: Union[str, int]) -> str:
    return quote(str(value), safe="")


def build_request_exception(url: str, status_code: int, body: str) -> RequestException:
    """Map an error answer to the matching exception.

    404 bodies are read for a symbol and description. Other bodies are
    parsed as ``<errors>`` when possible and attached to the exception;
    a declined transaction yields a :class:`TransactionException`.
    """
    if status_code == 404:
        try:
            error = ErrorMessage404.from_xml(body)
        except ValueError:
            error = None
        detail = (error.message if error is not None else None) or body
        return NotFoundException(
            url,
            ERROR_MESSAGE_TEMPLATE.format(status=status_code, detail=detail),
            status_code=status_code,
            body=body,
            symbol=error.symbol if error is not None else None,
            description=error.description if error is not None else None,
        )

    try:
        errors: Optional[Errors] = Errors.from_xml(body)
    except ValueError:
        errors = None
    message = ERROR_MESSAGE_TEMPLATE.format(status=status_code, detail=body)
    if errors is not None and errors.transaction_error is not None:
        return TransactionException(url, message, status_code=status_code, body=body, errors=errors)
    return RequestException(url, message, status_code=status_code, body=body, errors=errors)


class BaseRecurlyClient:
    """Configuration, request construction and response decoding."""

    def __init__(self, api_key: Optional[str] = None, host: Optional[str] = None,
                 port: Optional[int] = None, version: Optional[str] = None, *,
                 page_size: Optional[int] = None, debug: Optional[bool] = None,
                 hidden_xml_nodes: Optional[Iterable[str]] = None,
                 http_client: Any = None) -> None:
        settings = get_settings()
        api_key = api_key or settings.api_key
        if not api_key:
            raise RecurlyException("A Recurly API key is required (argument or RECURLY_API_KEY)")
        self.base_url = get_base_url(host or settings.host, port or settings.port,
                                     version or settings.api_version)
        self.headers = build_auth_headers(api_key)
        self.page_size = page_size or settings.page_size
        self.debug = settings.debug if debug is None else debug
        nodes = settings.hidden_xml_nodes if hidden_xml_nodes is None else hidden_xml_nodes
        self.hidden_xml_nodes = set(nodes)
        self.max_pages = settings.max_pages
        self.max_items = settings.max_items
        self.client_id = f"recurlyClientId={uuid.uuid4()}"
        self._http = http_client

    # ------------------------------------------------------------------
    # request construction
    # ------------------------------------------------------------------
    def _url(self, *segments: Union[str, int]) -> str:
        return self.base_url + "".join(str(s) for s in segments)

    def _query(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Default page size, overridden by ``params``."""
        query: Dict[str, Any] = {"per_page": self.page_size}
        if params:
            query.update(params)
        return query

    def _get(self, path: str, model: Type[RecurlyObject], *, many: bool = False,
             params: Optional[Dict[str, Any]] = None) -> Any:
        return self._call(RecurlyRequest("GET", self._url(path), model, params=self._query(params), many=many))

    def _post(self, path: str, payload: RecurlyObject, model: Type[RecurlyObject]) -> Any:
        return self._call(RecurlyRequest("POST", self._url(path), model, payload=payload))

    def _put(self, path: str, payload: Optional[RecurlyObject], model: Type[RecurlyObject]) -> Any:
        return self._call(RecurlyRequest("PUT", self._url(path), model, payload=payload))

    def _delete(self, path: str) -> Any:
        return self._call(RecurlyRequest("DELETE", self._url(path)))

    def _call(self, call: RecurlyRequest) -> Any:
        raise NotImplementedError

    def _iter(self, path: str, model: Type[RecurlyObject], params: Optional[Dict[str, Any]] = None) -> Any:
        raise NotImplementedError

    def _first_page(self, path: str, model: Type[RecurlyObject],
                    params: Optional[Dict[str, Any]]) -> RecurlyRequest:
        return RecurlyRequest("GET", self._url(path), model, params=self._query(params), many=True)

    @staticmethod
    def _next_page(url: str, model: Type[RecurlyObject]) -> RecurlyRequest:
        # the next link already carries per_page and the cursor
        return RecurlyRequest("GET", url, model, many=True)

    def _request_kwargs(self, call: RecurlyRequest) -> Dict[str, Any]:
        content = call.payload.to_xml() if call.payload is not None else None
        if self.debug:
            logger.info(json.dumps({
                "event": "recurly_request",
                "client_id": self.client_id,
                "method": call.method,
                "url": call.url,
                "payload": hide_xml_node_values(content, self.hidden_xml_nodes),
            }))
        return {"headers": self.headers, "params": call.params, "content": content}

    # ------------------------------------------------------------------
    # response handling
    # ------------------------------------------------------------------
    def _transport_error(self, call: RecurlyRequest, exc: Exception, *, logged: bool = False) -> RecurlyException:
        """Wrap a transport failure; ``logged`` when the transport already reported it."""
        if not logged:
            logger.error(json.dumps({
                "event": "http_error",
                "client_id": self.client_id,
                "method": call.method,
                "url": call.url,
                "detail": str(exc),
            }))
        return RecurlyException(f"Error while calling {call.url}")

    def _check(self, call: RecurlyRequest, response: Any, duration_ms: float) -> str:
        """Log the exchange and raise for error statuses; return the body."""
        url = str(getattr(response, "url", None) or call.url)
        body = response.text or ""
        log_http_request(call.method, url, client_id=self.client_id, params=call.params,
                         status=response.status_code, duration_ms=duration_ms)
        if response.status_code >= 300:
            logger.warning(json.dumps({
                "event": "recurly_error",
                "client_id": self.client_id,
                "url": url,
                "status": response.status_code,
                "body": hide_xml_node_values(body, self.hidden_xml_nodes),
            }))
            raise build_request_exception(url, response.status_code, body)
        if self.debug:
            logger.info(json.dumps({
                "event": "recurly_response",
                "client_id": self.client_id,
                "url": url,
                "status": response.status_code,
                "body": hide_xml_node_values(body, self.hidden_xml_nodes),
            }))
        return body

    @staticmethod
    def _decode(call: RecurlyRequest, body: str) -> Any:
        if call.model is None or not body.strip():
            return None
        try:
            if call.many:
                return call.model.list_from_xml(body)
            return call.model.from_xml(body)
        except ValueError as exc:
            raise RecurlyException(f"Unable to read {call.model.__name__} from {call.url}") from exc

    @staticmethod
    def _page(call: RecurlyRequest, response: Any, body: str) -> Tuple[List[Any], Optional[str]]:
        items = BaseRecurlyClient._decode(call, body) or []
        next_link = response.links.get("next", {}).get("url") if response.links else None
        return items, next_link


class RecurlyOperations(BaseRecurlyClient):
    """Recurly v2 resources.

    Return annotations describe the synchronous client; on
    :class:`~recurly_xml.clients.async_client.AsyncRecurlyClient` every
    operation returns an awaitable of the same value and every ``iter_*``
    an async iterator.
    """

    # -- accounts -------------------------------------------------------
    def create_account(self, account: Account) -> Account:
        """Create a new account, optionally with billing information."""
        return self._post(ACCOUNTS_RESOURCE, account, Account)

    def get_accounts(self) -> List[Account]:
        return self._get(ACCOUNTS_RESOURCE, Account, many=True)

    def iter_accounts(self) -> Any:
        return self._iter(ACCOUNTS_RESOURCE, Account)

    def get_account(self, account_code: str) -> Account:
        return self._get(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}", Account)

    def update_account(self, account_code: str, account: Account) -> Account:
        return self._put(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}", account, Account)

    def close_account(self, account_code: str) -> None:
        """Close an account.

        Active subscriptions are canceled and stored billing information is
        permanently removed.
        """
        return self._delete(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}")

    # -- subscriptions --------------------------------------------------
    def create_subscription(self, subscription: Subscription) -> Subscription:
        return self._post(SUBSCRIPTIONS_RESOURCE, subscription, Subscription)

    def get_subscription(self, uuid: str) -> Subscription:
        return self._get(f"{SUBSCRIPTIONS_RESOURCE}/{_segment(uuid)}", Subscription)

    def cancel_subscription(self, subscription: Union[Subscription, str]) -> Subscription:
        """Cancel a subscription; it stays active until the end of the billing cycle."""
        return self._subscription_action(subscription, "cancel")

    def reactivate_subscription(self, subscription: Union[Subscription, str]) -> Subscription:
        """Reactivate a canceled subscription so it renews at the end of the cycle."""
        return self._subscription_action(subscription, "reactivate")

    def _subscription_action(self, subscription: Union[Subscription, str], action: str) -> Any:
        if isinstance(subscription, Subscription):
            uuid, payload = subscription.uuid, subscription
        else:
            uuid, payload = subscription, None
        if not uuid:
            raise ValueError(f"Cannot {action} a subscription without uuid")
        return self._put(f"{SUBSCRIPTIONS_RESOURCE}/{_segment(uuid)}/{action}", payload, Subscription)

    def update_subscription(self, uuid: str, subscription_update: SubscriptionUpdate) -> Subscription:
        return self._put(f"{SUBSCRIPTIONS_RESOURCE}/{_segment(uuid)}", subscription_update, Subscription)

    def get_account_subscriptions(self, account_code: str,
                                  status: Optional[Union[SubscriptionState, str]] = None) -> List[Subscription]:
        """Subscriptions of an account, optionally only those in ``status``."""
        params = None
        if status is not None:
            params = {"state": status.value if isinstance(status, SubscriptionState) else status}
        return self._get(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{SUBSCRIPTIONS_RESOURCE}",
                         Subscription, many=True, params=params)

    # -- billing info ---------------------------------------------------
    def create_or_update_billing_info(self, billing_info: BillingInfo) -> BillingInfo:
        """Create or update the billing info of ``billing_info.account``.

        The card is only saved if it is valid; an outstanding balance may be
        collected to validate it. The account is created when it does not
        exist yet. The nested account only routes the request and is not
        sent.
        """
        account_code = billing_info.account.account_code if billing_info.account else None
        if not account_code:
            raise ValueError("billing_info.account.account_code is required")
        payload = billing_info.model_copy(update={"account": None})
        return self._put(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{BILLING_INFO_RESOURCE}",
                         payload, BillingInfo)

    def get_billing_info(self, account_code: str) -> BillingInfo:
        return self._get(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{BILLING_INFO_RESOURCE}", BillingInfo)

    def clear_billing_info(self, account_code: str) -> None:
        return self._delete(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{BILLING_INFO_RESOURCE}")

    # -- transactions ---------------------------------------------------
    def get_account_transactions(self, account_code: str,
                                 transaction_filter: Optional[TransactionFilter] = None,
                                 paging_params: Optional[PagingParams] = None) -> List[Transaction]:
        """Transaction history of an account.

        Without filter or paging the default page size is used; otherwise
        exactly the given ``state``/``type``/``per_page``/``cursor`` are sent.
        """
        url = self._url(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{TRANSACTIONS_RESOURCE}")
        if transaction_filter is None and paging_params is None:
            params: Dict[str, Any] = self._query()
        else:
            params = {}
            if transaction_filter is not None:
                params.update(transaction_filter.to_params())
            if paging_params is not None:
                params.update(paging_params.to_params())
        return self._call(RecurlyRequest("GET", url, Transaction, params=params, many=True))

    def iter_account_transactions(self, account_code: str,
                                  transaction_filter: Optional[TransactionFilter] = None) -> Any:
        params = transaction_filter.to_params() if transaction_filter is not None else None
        return self._iter(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{TRANSACTIONS_RESOURCE}",
                          Transaction, params)

    def create_transaction(self, transaction: Transaction) -> Transaction:
        return self._post(TRANSACTIONS_RESOURCE, transaction, Transaction)

    # -- invoices -------------------------------------------------------
    def get_account_invoices(self, account_code: str) -> List[Invoice]:
        return self._get(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{INVOICES_RESOURCE}", Invoice, many=True)

    def iter_account_invoices(self, account_code: str) -> Any:
        return self._iter(f"{ACCOUNTS_RESOURCE}/{_segment(account_code)}{INVOICES_RESOURCE}", Invoice)

    def get_invoice(self, invoice_id: Union[int, str]) -> Invoice:
        return self._get(f"{INVOICES_RESOURCE}/{_segment(invoice_id)}", Invoice)

    # -- plans and add-ons ----------------------------------------------
    def create_plan(self, plan: Plan) -> Plan:
        return self._post(PLANS_RESOURCE, plan, Plan)

    def get_plan(self, plan_code: str) -> Plan:
        return self._get(f"{PLANS_RESOURCE}/{_segment(plan_code)}", Plan)

    def get_plans(self) -> List[Plan]:
        return self._get(PLANS_RESOURCE, Plan, many=True)

    def iter_plans(self) -> Any:
        return self._iter(PLANS_RESOURCE, Plan)

    def delete_plan(self, plan_code: str) -> None:
        return self._delete(f"{PLANS_RESOURCE}/{_segment(plan_code)}")

    def create_plan_add_on(self, plan_code: str, add_on: AddOn) -> AddOn:
        return self._post(f"{PLANS_RESOURCE}/{_segment(plan_code)}{ADD_ONS_RESOURCE}", add_on, AddOn)

    def get_add_on(self, plan_code: str, add_on_code: str) -> AddOn:
        return self._get(f"{PLANS_RESOURCE}/{_segment(plan_code)}{ADD_ONS_RESOURCE}/{_segment(add_on_code)}",
                         AddOn)

    def get_add_ons(self, plan_code: str) -> List[AddOn]:
        return self._get(f"{PLANS_RESOURCE}/{_segment(plan_code)}{ADD_ONS_RESOURCE}", AddOn, many=True)

    def delete_add_on(self, plan_code: str, add_on_code: str) -> None:
        return self._delete(f"{PLANS_RESOURCE}/{_segment(plan_code)}{ADD_ONS_RESOURCE}/{_segment(add_on_code)}")

    # -- coupons --------------------------------------------------------
    def create_coupon(self, coupon: Coupon) -> Coupon:
        return self._post(COUPONS_RESOURCE, coupon, Coupon)

    def get_coupon(self, coupon_code: str) -> Coupon:
        return self._get(f"{COUPONS_RESOURCE}/{_segment(coupon_code)}", Coupon)

    def get_coupons(self) -> List[Coupon]:
        return self._get(COUPONS_RESOURCE, Coupon, many=True)

    def iter_coupons(self) -> Any:
        return self._iter(COUPONS_RESOURCE, Coupon)

    # -- Recurly.js results ---------------------------------------------
    def fetch_subscription(self, recurly_token: str) -> Subscription:
        """Subscription created by a Recurly.js form, looked up by its token."""
        return self._get(f"{FETCH_RESOURCE}/{_segment(recurly_token)}", Subscription)

    def fetch_billing_info(self, recurly_token: str) -> BillingInfo:
        return self._get(f"{FETCH_RESOURCE}/{_segment(recurly_token)}", BillingInfo)

    def fetch_invoice(self, recurly_token: str) -> Invoice:
        return self._get(f"{FETCH_RESOURCE}/{_segment(recurly_token)}", Invoice)
