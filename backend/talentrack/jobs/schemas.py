"""
Job and pipeline Pydantic schemas
"""
from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, Field
from datetime import datetime


JobStatus = Literal["draft", "open", "on_hold", "filled", "closed"]


class JobCreate(BaseModel):
    """Job creation schema"""
    title: str = Field(..., min_length=1, max_length=255)
    department: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    remote_allowed: bool = False
    description: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    openings: int = Field(1, ge=1)
    hiring_manager_id: Optional[int] = None
    stages: Optional[List[str]] = None  # Defaults to DEFAULT_PIPELINE_STAGES


class JobUpdate(BaseModel):
    """Job update schema; status changes go through the status endpoint"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    remote_allowed: Optional[bool] = None
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    openings: Optional[int] = Field(None, ge=1)
    hiring_manager_id: Optional[int] = None


class JobStatusUpdate(BaseModel):
    """Job status change request"""
    status: JobStatus


class StageResponse(BaseModel):
    """Pipeline stage"""
    id: int
    name: str
    position: int
    
    class Config:
        from_attributes = True


class StageCreate(BaseModel):
    """New pipeline stage; appended when position is omitted"""
    name: str = Field(..., min_length=1, max_length=100)
    position: Optional[int] = Field(None, ge=0)


class StageUpdate(BaseModel):
    """Rename a pipeline stage"""
    name: str = Field(..., min_length=1, max_length=100)


class StageOrder(BaseModel):
    """Full ordering of a job's stage ids"""
    stage_ids: List[int] = Field(..., min_length=1)


class JobResponse(BaseModel):
    """Job response schema"""
    id: int
    title: str
    department: Optional[str]
    location: Optional[str]
    employment_type: Optional[str]
    remote_allowed: bool
    description: Optional[str]
    requirements: Optional[List[str]]
    salary_min: Optional[int]
    salary_max: Optional[int]
    currency: str
    openings: int
    status: str
    opened_at: Optional[datetime]
    closed_at: Optional[datetime]
    hiring_manager_id: Optional[int]
    created_by: Optional[int]
    created_at: datetime
    stages: List[StageResponse]
    
    class Config:
        from_attributes = True


class PipelineStageCount(BaseModel):
    """Active applications sitting in one stage"""
    stage_id: int
    name: str
    position: int
    count: int


class PipelineSummary(BaseModel):
    """Pipeline snapshot for a job"""
    job_id: int
    stages: List[PipelineStageCount]
    status_counts: Dict[str, int]
    total: int
