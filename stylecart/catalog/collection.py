"""Curated collection shipped with the storefront and shown after remote stock."""

from __future__ import annotations

from stylecart.catalog.models import Product

_RAW_COLLECTION = [
    {
        "id": "indian-1",
        "name": "Traditional Indian Kurti",
        "description": "Elegant embroidered kurti perfect for festivals",
        "price": 2499,
        "category": "tops",
        "image_url": "https://img.theloom.in/blog/wp-content/uploads/2022/03/26-aug01427-e1647865850193.png",
        "stock": 15,
        "tags": ["indian", "traditional", "festival", "embroidered"],
    },
    {
        "id": "indian-2",
        "name": "Indian Silk Saree",
        "description": "Beautiful handwoven silk saree with intricate patterns",
        "price": 5299,
        "category": "dresses",
        "image_url": "https://img.theloom.in/blog/wp-content/uploads/2025/11/gs-ss04ubu2_4__1.png",
        "stock": 8,
        "tags": ["indian", "silk", "traditional", "wedding"],
    },
    {
        "id": "indian-3",
        "name": "Men's Kurta Pajama",
        "description": "Classic Indian kurta pajama set for special occasions",
        "price": 4749,
        "category": "mens-tops",
        "image_url": (
            "https://images.sareeswholesale.com/2024y/October/53328/Grey-Art%20Silk%20-Wedding%20Wear-"
            "Embroidery%20Work-Readymade%20Kurta%20Pajama%20With%20Jacket-1647-3388.jpg"
        ),
        "stock": 12,
        "tags": ["indian", "mens", "traditional", "formal"],
    },
    {
        "id": "indian-4",
        "name": "Indian Lehenga Choli",
        "description": "Stunning lehenga choli with heavy embroidery",
        "price": 7499,
        "category": "dresses",
        "image_url": (
            "https://assets.ajio.com/medias/sys_master/root/20250221/IvtB/"
            "67b7ae352960820c4999f901/-473Wx593H-701242963-yellow-MODEL.jpg"
        ),
        "stock": 5,
        "tags": ["indian", "lehenga", "wedding", "embroidered"],
    },
    {
        "id": "indian-5",
        "name": "Men's Sherwani",
        "description": "Elegant sherwani for weddings and formal events",
        "price": 8499,
        "category": "mens-outerwear",
        "image_url": (
            "https://assets.panashindia.com/media/catalog/product/cache/1/image/"
            "9df78eab33525d08d6e5fb8d27136e95/1/0/1067mw01-2681.jpg"
        ),
        "stock": 6,
        "tags": ["indian", "mens", "wedding", "formal"],
    },
    {
        "id": "indian-6",
        "name": "Indian Jodhpuri Pants",
        "description": "Traditional jodhpuri pants with modern fit",
        "price": 6299,
        "category": "mens-bottoms",
        "image_url": "https://img.perniaspopupshop.com/catalog/product/n/k/NKGCM022349_1.jpg?impolicy=listingimagenew",
        "stock": 20,
        "tags": ["indian", "mens", "traditional", "formal"],
    },
    {
        "id": "indian-7",
        "name": "Indian Mojari Shoes",
        "description": "Handcrafted mojari shoes with intricate embroidery",
        "price": 4799,
        "category": "mens-shoes",
        "image_url": "https://raaya.in/cdn/shop/files/IMG_2895-compressed_2048x.jpg?v=1729772354",
        "stock": 10,
        "tags": ["indian", "mens", "handcrafted", "traditional"],
    },
    {
        "id": "indian-8",
        "name": "Indian Anarkali Dress",
        "description": "Flowing anarkali dress with beautiful patterns",
        "price": 5699,
        "category": "dresses",
        "image_url": (
            "https://hatkebride.com/cdn/shop/files/"
            "Brown-Net-Full-Floor-Length-Anarkali-Dress-with-Fr-9.jpg?v=1754427889"
        ),
        "stock": 7,
        "tags": ["indian", "anarkali", "flowing", "elegant"],
    },
    {
        "id": "indian-9",
        "name": "Men's Nehru Jacket",
        "description": "Modern nehru jacket with contemporary design",
        "price": 9999,
        "category": "mens-outerwear",
        "image_url": (
            "https://colorweave.in/cdn/shop/products/"
            "nordlich-colorweave-kalamkari-black-motifs-mens-nehru-jacket-01_1080x1080.jpg?v=1677915303"
        ),
        "stock": 14,
        "tags": ["indian", "mens", "nehru", "modern"],
    },
    {
        "id": "indian-10",
        "name": "Indian Churidar Leggings",
        "description": "Comfortable churidar leggings for daily wear",
        "price": 1299,
        "category": "bottoms",
        "image_url": (
            "https://myprisma.in/cdn/shop/products/"
            "5_abadd10b-52a0-4896-9ea3-a9e769562214.jpg?v=1679115257&width=1946"
        ),
        "stock": 25,
        "tags": ["indian", "churidar", "comfortable", "daily"],
    },
]

CURATED_COLLECTION: tuple[Product, ...] = tuple(Product.model_validate(raw) for raw in _RAW_COLLECTION)
