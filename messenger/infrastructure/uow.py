# messenger/infrastructure/uow.py

from typing import Any, Dict, Type


def unwrap(model: Any) -> Any:
    if isinstance(model, UoWModel):
        return model.__dict__["_model"]
    return model


class UoWModel:
    """Proxy over an ORM row that reports attribute writes to its unit of work."""

    def __init__(self, model: Any, uow: "UnitOfWork"):
        self.__dict__["_model"] = model
        self.__dict__["_uow"] = uow

    def __getattr__(self, key):
        return getattr(self._model, key)

    def __setattr__(self, key, value):
        setattr(self._model, key, value)
        self._uow.register_dirty(self._model)

    def __repr__(self) -> str:
        return f"UoWModel({self._model!r})"


class UnitOfWork:
    def __init__(self) -> None:
        self.new: Dict[int, Any] = {}
        self.dirty: Dict[int, Any] = {}
        self.deleted: Dict[int, Any] = {}
        self.mappers: Dict[Type, Any] = {}

    @property
    def has_changes(self) -> bool:
        return bool(self.new or self.dirty or self.deleted)

    def register_new(self, model: Any) -> UoWModel:
        model = unwrap(model)
        self.new[id(model)] = model
        return UoWModel(model, self)

    def register_dirty(self, model: Any) -> None:
        model = unwrap(model)
        model_id = id(model)
        # pending inserts are written with their latest state anyway
        if model_id not in self.new and model_id not in self.deleted:
            self.dirty[model_id] = model

    def register_deleted(self, model: Any) -> None:
        model = unwrap(model)
        model_id = id(model)
        if self.new.pop(model_id, None) is not None:
            return
        self.dirty.pop(model_id, None)
        self.deleted[model_id] = model

    def mapper_for(self, model: Any):
        try:
            return self.mappers[type(model)]
        except KeyError:
            raise RuntimeError(
                f"No data mapper registered for {type(model).__name__}"
            ) from None

    def clear(self) -> None:
        self.new.clear()
        self.dirty.clear()
        self.deleted.clear()

    async def commit(self) -> None:
        if not self.has_changes:
            return
        # insertion order matters: chats are flushed before their participants
        for model in self.new.values():
            await self.mapper_for(model).insert(model)
        for model in self.dirty.values():
            await self.mapper_for(model).update(model)
        for model in self.deleted.values():
            await self.mapper_for(model).delete(model)

        self.clear()
