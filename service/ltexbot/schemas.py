from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


# Renderer API Request/Response models

class RenderRequest(BaseModel):
    latex_input: str = Field(..., alias="latexInput", description="LaTeX wrapped in align*")
    output_format: str = Field("JPG", alias="outputFormat")
    output_scale: str = Field("1000%", alias="outputScale")

    model_config = ConfigDict(populate_by_name=True)


class RenderResponse(BaseModel):
    image_url: Optional[str] = Field(None, alias="imageUrl")
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
