from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from leave_portal.store.state import Store
from leave_portal.routers.deps import get_store

router = APIRouter(prefix="/views", tags=["views"])


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def close_view(name: str, store: Store = Depends(get_store)):
    """Drops the pagination cursor of a closed list view. Idempotent."""
    store.close_view(name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
