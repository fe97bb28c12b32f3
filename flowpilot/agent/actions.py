"""
Action system for the Flowpilot orchestration core.

An Action is the atomic capability: a named, described unit of work whose
raw arguments are validated against a Pydantic model before its body runs.
"""

import json
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from loguru import logger
from pydantic import BaseModel, ValidationError

from .exceptions import AgentError, CapabilityDefect, InvalidCapabilityError, ParseError
from .models import ActionReturn, CapabilityInfo


class NoParams(BaseModel):
    """Parameter model for actions that take no arguments."""

    pass


ActionBody = Callable[[BaseModel], ActionReturn]


class Action:
    """
    Named, schema-validated unit of work.

    Actions are immutable once constructed. ``handle`` validates its raw
    arguments with the parameter model first; a validation failure raises
    ParseError and the body is never invoked.

    Example:
        ```python
        class RespondParams(BaseModel):
            response: str

        respond = Action(
            name="Respond",
            description="Responds to the user",
            params=RespondParams,
            execute=lambda p: ActionReturn(done=True, result=p.response),
        )
        respond.handle({"response": "hi"})
        ```
    """

    def __init__(
        self,
        name: str,
        description: str,
        params: Type[BaseModel],
        execute: ActionBody,
        errors: Tuple[Type[Exception], ...] = (),
    ):
        """
        Create an Action from a parameter model and a body.

        Parameters:
            name (str): Name of the action, unique within its container.
            description (str): Human-readable description for decision providers.
            params (Type[BaseModel]): Pydantic model that validates raw arguments.
            execute (Callable): Body receiving the validated model and returning an ActionReturn.
            errors (Tuple[Type[Exception], ...]): Additional exception types the body may raise.
                AgentError subclasses are always allowed through.

        Raises:
            InvalidCapabilityError: If ``name`` is empty, ``params`` is not a Pydantic model
                class, ``execute`` is not callable, or ``errors`` holds a non-exception.
        """
        if not name:
            raise InvalidCapabilityError(repr(name), "Action name must not be empty")
        if not (isinstance(params, type) and issubclass(params, BaseModel)):
            raise InvalidCapabilityError(name, "params must be a Pydantic model class")
        if not callable(execute):
            raise InvalidCapabilityError(name, "execute must be callable")
        for error in errors:
            if not (isinstance(error, type) and issubclass(error, BaseException)):
                raise InvalidCapabilityError(
                    name, f"declared error {error!r} is not an exception class"
                )

        self._name = name
        self._description = description
        self._params = params
        self._execute = execute
        self._errors = tuple(errors)

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def params(self) -> Type[BaseModel]:
        return self._params

    @property
    def errors(self) -> Tuple[Type[Exception], ...]:
        return self._errors

    def handle(self, args: Optional[Mapping[str, Any]] = None) -> ActionReturn:
        """
        Validate raw arguments and run the action body.

        Parameters:
            args (Optional[Mapping[str, Any]]): Raw, untyped arguments. ``None`` means no arguments.

        Returns:
            ActionReturn: The result produced by the body.

        Raises:
            ParseError: If ``args`` fails validation; the body is not invoked.
            AgentError: Any typed error raised by the body, unchanged.
            CapabilityDefect: If the body raises an undeclared exception or does not
                return an ActionReturn.
        """
        raw = dict(args or {})
        try:
            validated = self._params.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Action {self._name} rejected arguments: {e}")
            raise ParseError(str(e), action_name=self._name) from e

        logger.debug(f"Executing action: {self._name} with parameters: {raw}")
        try:
            result = self._execute(validated)
        except AgentError as e:
            logger.error(f"Action {self._name} failed: {e}")
            raise
        except self._errors as e:
            logger.error(f"Action {self._name} failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Action {self._name} raised undeclared {type(e).__name__}: {e}")
            raise CapabilityDefect(
                f"Action '{self._name}' raised undeclared {type(e).__name__}: {e}"
            ) from e

        if not isinstance(result, ActionReturn):
            raise CapabilityDefect(
                f"Action '{self._name}' returned {type(result).__name__}, expected ActionReturn"
            )

        logger.debug(f"Action {self._name} completed (done={result.done})")
        return result

    def get_schema(self) -> Dict[str, Any]:
        """
        Retrieve the JSON Schema that describes this action's parameters.

        Returns:
            Dict[str, Any]: JSON Schema generated from the parameter model.
        """
        return self._params.model_json_schema()

    def describe(self) -> CapabilityInfo:
        """Describe this action for a decision provider."""
        return CapabilityInfo(
            tag="Action",
            name=self._name,
            description=self._description,
            parameters=self.get_schema(),
        )

    def format_for_prompt(self) -> str:
        """Render name, description and schema as a prompt fragment."""
        return (
            f"Action: {self._name}\n"
            f"Description: {self._description}\n"
            f"Schema: {json.dumps(self.get_schema(), indent=2)}\n"
        )

    def __repr__(self) -> str:
        return f"Action(name={self._name})"


def create_action(
    name: str,
    description: str,
    execute: ActionBody,
    params: Type[BaseModel] = NoParams,
    errors: Tuple[Type[Exception], ...] = (),
) -> Action:
    """
    Build an Action. Nothing runs until ``handle`` is called.

    Parameters:
        name (str): Unique name within the owning agent.
        description (str): Human-readable description.
        execute (Callable): Body receiving the validated parameter model.
        params (Type[BaseModel]): Parameter model; defaults to NoParams.
        errors (Tuple[Type[Exception], ...]): Extra exception types the body declares.

    Returns:
        Action: The constructed action.
    """
    return Action(
        name=name,
        description=description,
        params=params,
        execute=execute,
        errors=errors,
    )
