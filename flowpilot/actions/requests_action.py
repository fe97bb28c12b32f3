"""
HTTP-backed actions.

RequestsAction turns an HTTP endpoint into an Action: validated parameters
are split into path, query and body values, the request is made with
``requests``, and transport or status failures surface as the declared
ActionExecutionError.
"""

import json
import string
from typing import Callable, Dict, List, Literal, Optional, Sequence, Tuple, Type

import requests
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from ..agent.actions import Action
from ..agent.exceptions import ActionExecutionError, InvalidCapabilityError
from ..agent.models import ActionReturn

ResponseHandler = Callable[[requests.Response], ActionReturn]


def _default_response_handler(response: requests.Response) -> ActionReturn:
    try:
        return ActionReturn(done=False, result=json.dumps(response.json(), indent=2))
    except ValueError:
        return ActionReturn(done=False, result=response.text)


class RequestsAction(Action):
    """
    An Action that calls an HTTP endpoint.

    Example:
        ```python
        class WeatherParams(BaseModel):
            city: str

        weather = RequestsAction(
            name="GetWeather",
            description="Get current weather for a city",
            params=WeatherParams,
            url_template="https://api.weather.example/v1/current",
            query_params=["city"],
        )
        weather.handle({"city": "London"})
        ```
    """

    def __init__(
        self,
        name: str,
        description: str,
        params: Type[BaseModel],
        url_template: str,
        method: Literal["GET", "POST", "PUT", "DELETE", "PATCH"] = "GET",
        headers: Optional[Dict[str, str]] = None,
        path_params: Sequence[str] = (),
        query_params: Sequence[str] = (),
        body_params: Sequence[str] = (),
        response_handler: Optional[ResponseHandler] = None,
        timeout: int = 30,
        auth: Optional[tuple] = None,
    ):
        """
        Initialize the RequestsAction.

        Args:
            name: Unique name for the action
            description: Human-readable description of what the endpoint does
            params: Pydantic model validating the action's arguments
            url_template: URL with optional {param} placeholders
            method: HTTP method
            headers: Headers sent with every request
            path_params: Fields substituted into url_template
            query_params: Fields sent as query string parameters
            body_params: Fields sent as a JSON body (POST, PUT and PATCH only)
            response_handler: Maps a successful response to an ActionReturn;
                the default returns the JSON (or text) body with done=False
            timeout: Request timeout in seconds
            auth: Optional tuple of (username, password) for basic auth

        Raises:
            InvalidCapabilityError: If a path, query or body field is not defined on ``params``
        """
        super().__init__(
            name=name,
            description=description,
            params=params,
            execute=self._request,
            errors=(ActionExecutionError,),
        )

        for group in (path_params, query_params, body_params):
            unknown = [key for key in group if key not in params.model_fields]
            if unknown:
                raise InvalidCapabilityError(
                    name, f"request fields {unknown} are not defined on {params.__name__}"
                )

        self._method = method.upper()
        self._url_template = url_template
        self._headers = dict(headers or {})
        self._path_params: Tuple[str, ...] = tuple(path_params)
        self._query_params: Tuple[str, ...] = tuple(query_params)
        self._body_params: Tuple[str, ...] = tuple(body_params)
        self._response_handler = response_handler or _default_response_handler
        self._timeout = timeout
        self._auth = auth

    @property
    def method(self) -> str:
        return self._method

    @property
    def url_template(self) -> str:
        return self._url_template

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    @property
    def path_params(self) -> Tuple[str, ...]:
        return self._path_params

    @property
    def query_params(self) -> Tuple[str, ...]:
        return self._query_params

    @property
    def body_params(self) -> Tuple[str, ...]:
        return self._body_params

    @property
    def timeout(self) -> int:
        return self._timeout

    def _request(self, params: BaseModel) -> ActionReturn:
        values = params.model_dump()

        url = self.url_template
        if self.path_params:
            url = url.format(**{key: values[key] for key in self.path_params})

        query = {key: values[key] for key in self.query_params if values.get(key) is not None}
        body = {key: values[key] for key in self.body_params if key in values}

        logger.debug(f"Making {self.method} request to {url}")
        logger.debug(f"Query params: {query}")
        logger.debug(f"Body data: {body}")

        try:
            response = requests.request(
                method=self.method,
                url=url,
                params=query or None,
                json=body if body and self.method in ("POST", "PUT", "PATCH") else None,
                headers=self.headers,
                auth=self._auth,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise ActionExecutionError(self.name, str(e)) from e

        return self._response_handler(response)


def create_http_action(
    name: str,
    description: str,
    endpoint: str,
    params: Type[BaseModel],
    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH"] = "GET",
    headers: Optional[Dict[str, str]] = None,
    response_handler: Optional[ResponseHandler] = None,
    timeout: int = 30,
) -> RequestsAction:
    """
    Factory function to quickly create a RequestsAction for an API endpoint.

    Fields named by {placeholders} in ``endpoint`` fill the path. Every other
    field of ``params`` is sent as a query parameter for GET and DELETE, and as
    the JSON body for POST, PUT and PATCH.

    Args:
        name: Action name
        description: Action description
        endpoint: API endpoint URL, optionally with {field} placeholders
        params: Pydantic model validating the action's arguments
        method: HTTP method
        headers: Request headers
        response_handler: Optional mapping from response to ActionReturn
        timeout: Request timeout in seconds

    Returns:
        Configured RequestsAction instance

    Example:
        ```python
        class RepoSearchParams(BaseModel):
            q: str
            sort: Literal["stars", "forks", "updated"] = "stars"

        search_repos = create_http_action(
            name="SearchRepos",
            description="Search GitHub repositories",
            endpoint="https://api.github.com/search/repositories",
            params=RepoSearchParams,
        )
        ```
    """
    path_params = [
        field for _, field, _, _ in string.Formatter().parse(endpoint) if field
    ]
    remaining = [
        field for field in getattr(params, "model_fields", {}) if field not in path_params
    ]
    sends_body = method.upper() in ("POST", "PUT", "PATCH")

    return RequestsAction(
        name=name,
        description=description,
        params=params,
        url_template=endpoint,
        method=method,
        headers=headers,
        path_params=path_params,
        query_params=() if sends_body else remaining,
        body_params=remaining if sends_body else (),
        response_handler=response_handler,
        timeout=timeout,
    )


class JokeSearchParams(BaseModel):
    term: str = Field(..., description="The search term to use to find dad jokes")


class DadJoke(BaseModel):
    id: str
    joke: str


class JokeSearchResponse(BaseModel):
    results: List[DadJoke]


def _first_joke(action_name: str) -> ResponseHandler:
    def handler(response: requests.Response) -> ActionReturn:
        try:
            payload = JokeSearchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ActionExecutionError(action_name, f"Unexpected response body: {e}") from e
        if not payload.results:
            raise ActionExecutionError(action_name, "No joke found for that search term")
        return ActionReturn(done=False, result=payload.results[0].joke)

    return handler


def create_joke_search_action(
    name: str = "GetDadJoke",
    base_url: str = "https://icanhazdadjoke.com",
    timeout: int = 10,
) -> RequestsAction:
    """
    Build an action returning the first dad joke matching ``term``.

    Args:
        name: Action name
        base_url: Root of the icanhazdadjoke API
        timeout: Request timeout in seconds

    Returns:
        RequestsAction configured for the /search endpoint
    """
    return RequestsAction(
        name=name,
        description="Get a hilarious dad joke from the ICanHazDadJoke API",
        params=JokeSearchParams,
        url_template=f"{base_url.rstrip('/')}/search",
        query_params=["term"],
        headers={"Accept": "application/json"},
        response_handler=_first_joke(name),
        timeout=timeout,
    )
