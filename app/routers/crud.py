"""Generic CRUD endpoints over one unit-of-work repository."""
from typing import Any, Callable, List, Type

from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel

from app.dependencies import get_uow
from app.schemas import CreatedResponse
from app.utils import error_boundary, parse_body, parse_id


def register_crud(
    router: APIRouter,
    path: str,
    name: str,
    plural: str,
    request_model: Type[BaseModel],
    response_model: Type[BaseModel],
    repository: Callable,
    with_show: bool = True,
) -> None:
    """Add create/update/show/list/delete routes for one entity.

    ``repository`` picks the entity's repository off a unit of work.
    Ids are parsed before bodies, so a malformed id answers 404 whatever
    the body holds; bodies are validated against ``request_model``.
    """

    async def create(payload: Any = Body(default=None), uow=Depends(get_uow)) -> CreatedResponse:
        with error_boundary(f"Unexpected error on create {name}"):
            body = parse_body(payload, request_model, name)
            async with uow:
                entity_id = await repository(uow).create(body.model_dump())
                await uow.commit()
        return CreatedResponse(id=entity_id)

    async def update(entity_id: str, payload: Any = Body(default=None), uow=Depends(get_uow)) -> CreatedResponse:
        with error_boundary(f"Unexpected error on update {name}"):
            parsed_id = parse_id(entity_id, name)
            body = parse_body(payload, request_model, name)
            async with uow:
                await repository(uow).update(parsed_id, body.model_dump())
                await uow.commit()
        return CreatedResponse(id=parsed_id)

    async def show(entity_id: str, uow=Depends(get_uow)):
        with error_boundary(f"Unexpected error on show {name}"):
            parsed_id = parse_id(entity_id, name)
            async with uow:
                entity = await repository(uow).show(parsed_id)
        return response_model.model_validate(entity)

    async def list_entities(uow=Depends(get_uow)):
        with error_boundary(f"Unexpected error on list {plural}"):
            async with uow:
                entities = await repository(uow).list()
        return [response_model.model_validate(entity) for entity in entities]

    async def delete(entity_id: str, uow=Depends(get_uow)) -> CreatedResponse:
        with error_boundary(f"Unexpected error on delete {name}"):
            parsed_id = parse_id(entity_id, name)
            async with uow:
                await repository(uow).delete(parsed_id)
                await uow.commit()
        return CreatedResponse(id=parsed_id)

    item_path = f"{path}/{{entity_id}}"
    router.add_api_route(path, list_entities, methods=["GET"], response_model=List[response_model])
    router.add_api_route(
        path, create, methods=["POST"], response_model=CreatedResponse, status_code=status.HTTP_201_CREATED
    )
    if with_show:
        router.add_api_route(item_path, show, methods=["GET"], response_model=response_model)
    router.add_api_route(
        item_path, update, methods=["PUT"], response_model=CreatedResponse, status_code=status.HTTP_201_CREATED
    )
    router.add_api_route(
        item_path, delete, methods=["DELETE"], response_model=CreatedResponse, status_code=status.HTTP_201_CREATED
    )
