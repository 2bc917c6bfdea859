"""Relational schema of the catalog, customers and orders."""
from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, MetaData, String, Table

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("email", String, nullable=False),
    Column("phone", String, nullable=False),
    Column("address", String, nullable=False),
    Column("observation", String, nullable=True),
)

categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("image_url", String, nullable=False),
    Column("category_id", Integer, ForeignKey("categories.id"), nullable=True),
)

features = Table(
    "features",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
)

packings = Table(
    "packings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("size", Float, nullable=False),
    Column("unit", String, nullable=False),
    Column("unit_abbreviation", String, nullable=False),
    Column("cost", Float, nullable=False),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("description", String, nullable=False),
    Column("is_packed", Boolean, nullable=False),
    Column("unit_cost", Float, nullable=False),
    Column("unit_price", Float, nullable=True),
    Column("category_id", Integer, ForeignKey("categories.id"), nullable=False),
    Column("is_activated", Boolean, nullable=False, default=True),
)

product_features = Table(
    "product_features",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("feature_id", Integer, ForeignKey("features.id"), nullable=False),
)

product_packings = Table(
    "product_packings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("packing_id", Integer, ForeignKey("packings.id"), nullable=False),
    Column("price", Float, nullable=False, default=0),
    Column("quantity", Float, nullable=False, default=0),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_id", Integer, ForeignKey("customers.id"), nullable=False),
    Column("order_date", String, nullable=False),
    Column("delivery_date", String, nullable=False),
    Column("status", String, nullable=False),
    Column("discount", Float, nullable=False, default=0),
    Column("shipping", Float, nullable=False, default=0),
    Column("observation", String, nullable=True),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id"), nullable=False),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("packing_id", Integer, ForeignKey("packings.id"), nullable=True),
    Column("amount", Float, nullable=False),
    Column("unit_price", Float, nullable=False),
)
