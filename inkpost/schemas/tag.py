"""Tag Schemas — rule lists for tag requests."""

from inkpost.core.validation_rules import RequestSchema
from inkpost.schemas.common import (
    description_rule, id_params_schema, limit_rule, meta_rules, name_rule,
    page_rule, search_rule, slug_rule, sort_by_rule, sort_order_rule,
)

TAG_SORT_FIELDS = ("name", "createdAt")

CREATE_TAG = RequestSchema(
    "create tag",
    [name_rule(50, True), slug_rule(50, True), description_rule(), *meta_rules()],
)

UPDATE_TAG = RequestSchema(
    "update tag",
    [name_rule(50, False), slug_rule(50, False), description_rule(), *meta_rules()],
)

TAG_LIST_QUERY = RequestSchema(
    "tag list query",
    [
        page_rule(),
        limit_rule(),
        search_rule(),
        sort_by_rule(TAG_SORT_FIELDS, default="name"),
        sort_order_rule(),
    ],
)

TAG_ID_PARAMS = id_params_schema("Tag")
