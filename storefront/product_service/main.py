# storefront/product_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


PRODUCTS = {
    1: {
        "id": 1,
        "name": "Keyboard",
        "status": "ACTIVE",
        "sku": "KB-STD",
        "base_price": 199.99,
        "inventory_tracking": True,
        "stock": 25,
        "variants": [
            {"id": 11, "name": "ISO layout", "sku": "KB-ISO", "price": 209.99, "stock": 10},
            {"id": 12, "name": "ANSI layout", "sku": "KB-ANSI", "price": 199.99, "stock": 0},
        ],
    },
    2: {
        "id": 2,
        "name": "Mouse",
        "status": "ACTIVE",
        "sku": "MS-STD",
        "base_price": 49.50,
        "inventory_tracking": True,
        "stock": 100,
        "variants": [],
    },
    3: {
        "id": 3,
        "name": "Monitor",
        "status": "ACTIVE",
        "sku": "MON-27",
        "base_price": 899.00,
        "inventory_tracking": False,
        "stock": 0,
        "variants": [],
    },
    4: {
        "id": 4,
        "name": "Webcam",
        "status": "DISCONTINUED",
        "sku": "CAM-HD",
        "base_price": 79.00,
        "inventory_tracking": True,
        "stock": 3,
        "variants": [],
    },
}


@app.get("/products")
def list_products():
    return list(PRODUCTS.values())


@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
