# Catalog defaults substituted when a product document omits a field.
FALLBACK_CATEGORY = "Electronics"     # used to query related items and on suggestion cards
SPEC_FALLBACK_CATEGORY = "General"    # shown in the specifications table
TAG_FALLBACK = "product"              # single tag shown when a product has none
FALLBACK_BRAND = "Unknown"
FALLBACK_NAME = "Unnamed Product"
FALLBACK_DESCRIPTION = "A high-quality product for your needs."
FALLBACK_WAREHOUSE = "Warehouse"
SKU_PREFIX = "PRD"

# Suggestion Set
SUGGESTION_LIMIT = 4

# Image gallery
THUMBNAIL_LIMIT = 3
THUMBNAIL_FALLBACK_IMAGE = "/Images/DSLR.png"  # slot with an empty reference
BROKEN_IMAGE_FALLBACK = "/Images/default.png"  # swapped in once when an image fails to load

# Routing surface
PATH_AUTH = "/auth"
PATH_HOME = "/"
PATH_ACCOUNT = "/account"
PATH_UPLOAD = "/list-your-item"
PATH_PRODUCT_PREFIX = "/product/"
PATH_ALL_PRODUCTS = "/all-products"

# Home page sections, top to bottom
HOME_SECTIONS = ("hero", "featured-rentals", "category-browser", "how-it-works", "safe-and-secure")
FEATURED_LIMIT = 4
