# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CategoryModel, ProductModel, UserModel, UserRole
from storefront.services.catalog_service import slugify
from storefront.utils.security import hash_password
from storefront.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    ("Electronics", "Latest gadgets and electronic devices",
     "https://images.unsplash.com/photo-1498049794561-7780e7231661?w=800"),
    ("Fashion", "Trendy clothing and accessories",
     "https://images.unsplash.com/photo-1445205170230-053b83016050?w=800"),
    ("Home & Living", "Furniture and home decor",
     "https://images.unsplash.com/photo-1484101403633-562f891dc89a?w=800"),
    ("Sports & Outdoors", "Equipment for active lifestyles",
     "https://images.unsplash.com/photo-1461896836934-ffe607ba8211?w=800"),
    ("Books", "Bestsellers and timeless classics", None),
]

# (nazwa, kategoria, cena, stan, wyrozniony)
PRODUCTS = [
    ("Wireless Headphones", "Electronics", "199.99", 25, True),
    ("Mechanical Keyboard", "Electronics", "129.00", 40, False),
    ("Denim Jacket", "Fashion", "89.50", 15, True),
    ("Ceramic Vase", "Home & Living", "34.00", 60, False),
    ("Yoga Mat", "Sports & Outdoors", "29.99", 80, False),
    ("The Pragmatic Programmer", "Books", "45.00", 30, True),
]


def _category_slug(name: str) -> str:
    # "Home & Living" -> "home-living"
    return slugify(name.replace("&", " "))


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # tylko brakujace rekordy
        if not db.query(UserModel).filter(UserModel.email == ADMIN_EMAIL).first():
            db.add(
                UserModel(
                    email=ADMIN_EMAIL,
                    name="Admin User",
                    password_hash=hash_password(ADMIN_PASSWORD),
                    role=UserRole.ADMIN.value,
                )
            )
            logger.info(f"Utworzono admina {ADMIN_EMAIL}")

        categories = {}
        for name, description, image in CATEGORIES:
            slug = _category_slug(name)
            category = db.query(CategoryModel).filter(CategoryModel.slug == slug).first()
            if not category:
                category = CategoryModel(name=name, slug=slug, description=description, image=image)
                db.add(category)
                db.flush()
            categories[name] = category

        for name, category_name, price, stock, featured in PRODUCTS:
            slug = slugify(name)
            if db.query(ProductModel).filter(ProductModel.slug == slug).first():
                continue
            db.add(
                ProductModel(
                    name=name,
                    slug=slug,
                    description=f"{name} from our {category_name} collection.",
                    price=Decimal(price),
                    stock=stock,
                    images=[f"https://picsum.photos/seed/{slug}/800"],
                    featured=featured,
                    category_id=categories[category_name].id,
                )
            )

        db.commit()
        logger.info("Seed zakonczony")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
