"""Three-tier tag set sent on create."""

from pydantic import BaseModel, Field

from .resource import Tag


class TagSet(BaseModel):
    """
    Tags from the three sources that contribute to a remote write.

    Resource tags win over stack tags, which win over system tags.
    """

    resource_tags: list[Tag] = Field(
        default_factory=list, description="Tags declared on the resource itself"
    )
    stack_tags: list[Tag] = Field(
        default_factory=list, description="Tags propagated from the owning stack"
    )
    system_tags: list[Tag] = Field(
        default_factory=list, description="Platform-injected tags (aws:cloudformation:*)"
    )

    def is_empty(self) -> bool:
        return not (self.resource_tags or self.stack_tags or self.system_tags)
