from sqlalchemy.orm import Session

from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo


class AdminService:
    def __init__(self, db: Session):
        self.catalog = CatalogRepo(db)
        self.orders = OrderRepo(db)
        self.users = UserRepo(db)

    def get_stats(self) -> dict:
        # przychod liczony tylko z oplaconych zamowien (PROCESSING)
        return {
            "total_products": self.catalog.count_products(),
            "total_orders": self.orders.count_orders(),
            "total_users": self.users.count_users(),
            "total_revenue": self.orders.revenue(),
        }
