# binpick/adapters/queries.py
"""
Admin GraphQL documents used by the picking overlay.

The picking status lives in the order metafield picking.status
(single_line_text_field).
"""

PICKING_NAMESPACE = "picking"
PICKING_KEY = "status"
PICKING_METAFIELD_TYPE = "single_line_text_field"

VARIANT_BY_BARCODE = """
query VariantByBarcode($q: String!, $first: Int!) {
  productVariants(first: $first, query: $q) {
    nodes {
      id
      barcode
      sku
      title
      product { title }
      image { url altText }
    }
  }
}
"""

ORDERS_WITH_PICKING_STATUS = """
query OrdersWithPickingStatus($first: Int!) {
  orders(first: $first, sortKey: CREATED_AT, reverse: true) {
    nodes {
      id
      name
      createdAt
      displayFulfillmentStatus
      customer { displayName }
      metafield(namespace: "picking", key: "status") { value }
    }
  }
}
"""

ORDER_DETAIL = """
query OrderDetail($id: ID!, $lines: Int!) {
  order(id: $id) {
    id
    name
    createdAt
    displayFulfillmentStatus
    customer { displayName }
    metafield(namespace: "picking", key: "status") { value }
    lineItems(first: $lines) {
      nodes {
        id
        title
        quantity
        variant { id sku barcode }
        image { url altText }
      }
    }
  }
}
"""

PICKING_STATUS_OF = """
query PickingStatusOf($id: ID!) {
  order(id: $id) {
    id
    metafield(namespace: "picking", key: "status") { value }
  }
}
"""

SET_PICKING_STATUS = """
mutation SetPickingStatus($metafields: [MetafieldsSetInput!]!) {
  metafieldsSet(metafields: $metafields) {
    metafields { id value }
    userErrors { field message }
  }
}
"""
