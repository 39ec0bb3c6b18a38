from typing import Type, TypeVar, Generic, Optional
from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, **filters) -> Optional[T]:
        return self.model.objects.filter(**filters).first()

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def update(self, obj: T, **data) -> T:
        """Assign the given fields and persist only those columns."""
        for k, v in data.items():
            setattr(obj, k, v)
        update_fields = list(data.keys())
        # auto_now columns are only refreshed when named explicitly
        for field in obj._meta.concrete_fields:
            if getattr(field, "auto_now", False) and field.name not in update_fields:
                update_fields.append(field.name)
        obj.save(update_fields=update_fields or None)
        return obj

    def delete_where(self, **filters) -> int:
        """Bulk delete matching rows and return how many rows of this model went away."""
        _total, per_model = self.model.objects.filter(**filters).delete()
        return per_model.get(self.model._meta.label, 0)
