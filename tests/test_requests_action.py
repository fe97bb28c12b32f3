"""
Tests for HTTP-backed actions.
"""

from unittest.mock import Mock, patch

import pytest
import requests
from pydantic import BaseModel

from flowpilot.actions import RequestsAction, create_http_action, create_joke_search_action
from flowpilot.agent.exceptions import ActionExecutionError, InvalidCapabilityError, ParseError
from flowpilot.agent.models import ActionReturn


class RepoParams(BaseModel):
    owner: str
    repo: str
    per_page: int = 5


class IssueParams(BaseModel):
    owner: str
    title: str
    labels: list = []


def _response(json_data=None, text="", status=200):
    response = Mock()
    response.status_code = status
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_data
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status} Error")
    else:
        response.raise_for_status.return_value = None
    return response


class TestRequestsAction:
    """Tests for RequestsAction."""

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_get_with_path_and_query(self, mock_request):
        """Test URL templating and query parameters."""
        mock_request.return_value = _response({"stars": 42})
        action = RequestsAction(
            name="ListCommits",
            description="List commits",
            params=RepoParams,
            url_template="https://api.example.com/repos/{owner}/{repo}/commits",
            path_params=["owner", "repo"],
            query_params=["per_page"],
        )

        result = action.handle({"owner": "octo", "repo": "hello"})

        assert result.done is False
        assert '"stars": 42' in result.result
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://api.example.com/repos/octo/hello/commits"
        assert kwargs["params"] == {"per_page": 5}
        assert kwargs["json"] is None

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_post_sends_body(self, mock_request):
        """Test that body fields are sent as JSON for POST."""
        mock_request.return_value = _response({"id": 1})
        action = RequestsAction(
            name="CreateIssue",
            description="Create an issue",
            params=IssueParams,
            method="post",
            url_template="https://api.example.com/{owner}/issues",
            path_params=["owner"],
            body_params=["title", "labels"],
        )

        action.handle({"owner": "octo", "title": "Broken build"})

        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["json"] == {"title": "Broken build", "labels": []}
        assert kwargs["params"] is None

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_text_response(self, mock_request):
        """Test that non-JSON bodies are returned as text."""
        mock_request.return_value = _response(text="plain body")
        action = RequestsAction(
            name="Ping",
            description="Ping",
            params=RepoParams,
            url_template="https://api.example.com/ping",
        )

        assert action.handle({"owner": "a", "repo": "b"}).result == "plain body"

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_http_error_is_declared_error(self, mock_request):
        """Test that HTTP failures surface as ActionExecutionError."""
        mock_request.return_value = _response({"message": "Not Found"}, status=404)
        action = RequestsAction(
            name="Missing",
            description="",
            params=RepoParams,
            url_template="https://api.example.com/missing",
        )

        with pytest.raises(ActionExecutionError) as exc_info:
            action.handle({"owner": "a", "repo": "b"})
        assert exc_info.value.action_name == "Missing"

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_connection_error_is_declared_error(self, mock_request):
        """Test that transport failures surface as ActionExecutionError."""
        mock_request.side_effect = requests.exceptions.ConnectionError("unreachable")
        action = RequestsAction(
            name="Offline",
            description="",
            params=RepoParams,
            url_template="https://api.example.com/",
        )

        with pytest.raises(ActionExecutionError):
            action.handle({"owner": "a", "repo": "b"})

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_invalid_params_never_hit_network(self, mock_request):
        """Test that validation happens before any request."""
        action = RequestsAction(
            name="ListCommits",
            description="",
            params=RepoParams,
            url_template="https://api.example.com/",
        )

        with pytest.raises(ParseError):
            action.handle({"owner": "only"})
        mock_request.assert_not_called()

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_custom_response_handler(self, mock_request):
        """Test that a handler can mark the result as done."""
        mock_request.return_value = _response({"answer": "yes"})
        action = RequestsAction(
            name="Ask",
            description="",
            params=RepoParams,
            url_template="https://api.example.com/ask",
            response_handler=lambda r: ActionReturn(done=True, result=r.json()["answer"]),
        )

        assert action.handle({"owner": "a", "repo": "b"}) == ActionReturn(done=True, result="yes")


    def test_unknown_path_field_rejected(self):
        """Test that a path field missing from the model fails at construction."""
        with pytest.raises(InvalidCapabilityError):
            RequestsAction(
                name="GetUser",
                description="",
                params=RepoParams,
                url_template="https://api.example.com/users/{id}",
                path_params=["id"],
            )

    def test_unknown_query_field_rejected(self):
        """Test that query and body fields are checked as well."""
        with pytest.raises(InvalidCapabilityError):
            RequestsAction(
                name="ListCommits",
                description="",
                params=RepoParams,
                url_template="https://api.example.com/",
                query_params=["page"],
            )

    def test_request_settings_are_read_only(self):
        """Test that request settings cannot be changed after construction."""
        action = RequestsAction(
            name="ListCommits",
            description="",
            params=RepoParams,
            url_template="https://api.example.com/repos/{owner}/{repo}",
            path_params=["owner", "repo"],
            headers={"Accept": "application/json"},
        )

        with pytest.raises(AttributeError):
            action.method = "DELETE"
        with pytest.raises(AttributeError):
            action.url_template = "https://evil.example.com"
        action.headers["Accept"] = "text/html"

        assert action.headers == {"Accept": "application/json"}
        assert action.path_params == ("owner", "repo")


class TestCreateHttpAction:
    """Tests for the create_http_action factory."""

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_get_routes_placeholders_and_query(self, mock_request):
        """Test that placeholders fill the path and other fields become query params."""
        mock_request.return_value = _response({"total_count": 1})
        action = create_http_action(
            name="ListCommits",
            description="List commits",
            endpoint="https://api.example.com/repos/{owner}/{repo}/commits",
            params=RepoParams,
        )

        action.handle({"owner": "octo", "repo": "hello", "per_page": 2})

        assert isinstance(action, RequestsAction)
        assert action.path_params == ("owner", "repo")
        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == "https://api.example.com/repos/octo/hello/commits"
        assert kwargs["params"] == {"per_page": 2}
        assert kwargs["json"] is None

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_post_sends_remaining_fields_as_body(self, mock_request):
        """Test that non-path fields are sent as the JSON body for POST."""
        mock_request.return_value = _response({"id": 7})
        action = create_http_action(
            name="CreateIssue",
            description="Create an issue",
            endpoint="https://api.example.com/{owner}/issues",
            params=IssueParams,
            method="POST",
            headers={"Authorization": "token abc"},
        )

        action.handle({"owner": "octo", "title": "Broken build", "labels": ["bug"]})

        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "https://api.example.com/octo/issues"
        assert kwargs["json"] == {"title": "Broken build", "labels": ["bug"]}
        assert kwargs["params"] is None
        assert kwargs["headers"] == {"Authorization": "token abc"}

    def test_placeholder_missing_from_model(self):
        """Test that an endpoint placeholder without a matching field is rejected."""
        with pytest.raises(InvalidCapabilityError):
            create_http_action(
                name="GetUser",
                description="",
                endpoint="https://api.example.com/users/{user_id}",
                params=RepoParams,
            )

class TestJokeSearchAction:
    """Tests for the dad joke search action."""

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_returns_first_joke(self, mock_request):
        """Test that the first search result is returned."""
        mock_request.return_value = _response(
            {
                "results": [
                    {"id": "a1", "joke": "Why did the scientist install a knocker? To win the No-bell prize."},
                    {"id": "b2", "joke": "second"},
                ]
            }
        )
        action = create_joke_search_action()

        result = action.handle({"term": "scientist"})

        assert action.name == "GetDadJoke"
        assert result.done is False
        assert "No-bell" in result.result
        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == "https://icanhazdadjoke.com/search"
        assert kwargs["params"] == {"term": "scientist"}
        assert kwargs["headers"]["Accept"] == "application/json"

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_no_results(self, mock_request):
        """Test that an empty result list is a declared failure."""
        mock_request.return_value = _response({"results": []})

        with pytest.raises(ActionExecutionError):
            create_joke_search_action().handle({"term": "zzzz"})

    @patch("flowpilot.actions.requests_action.requests.request")
    def test_unexpected_body(self, mock_request):
        """Test that a malformed body is a declared failure."""
        mock_request.return_value = _response({"jokes": "nope"})

        with pytest.raises(ActionExecutionError):
            create_joke_search_action().handle({"term": "cat"})

    def test_term_is_required(self):
        """Test that the search term is validated."""
        with pytest.raises(ParseError):
            create_joke_search_action().handle({})
