from enque_desk.clients.api_client import EnqueApiClient, clean_params
from enque_desk.models.schemas.category import CategoryCreateRequest, CategoryRead


class CategoryService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def list_categories(self, *, skip: int = 0, limit: int = 100) -> list[CategoryRead]:
        data = self.api_client.get("/categories/", params=clean_params({"skip": skip, "limit": limit}))
        return [CategoryRead.model_validate(item) for item in data or []]

    def create_category(self, payload: CategoryCreateRequest) -> CategoryRead:
        data = self.api_client.post(
            "/categories/",
            json={"name": payload.name, "workspace_id": self.workspace_id},
        )
        return CategoryRead.model_validate(data)

    def delete_category(self, category_id: int) -> None:
        self.api_client.delete(f"/categories/{category_id}")
