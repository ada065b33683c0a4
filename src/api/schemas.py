"""Response models for the vitals endpoint."""

from pydantic import BaseModel, ConfigDict

from model.vitals import VitalsSnapshot

TITLE = "vitals-glimpse"
VERSION = "0.4"


class VitalsResponse(BaseModel):
    title: str = TITLE
    version: str = VERSION
    mem_status: str
    mem_percent: int
    disk_status: str
    disk_percent: int
    cpu_status: str
    cpu_percent: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": TITLE,
                "version": VERSION,
                "mem_status": "mem_okay",
                "mem_percent": 37,
                "disk_status": "disk_okay",
                "disk_percent": 15,
                "cpu_status": "cpu_okay",
                "cpu_percent": 2,
            }
        }
    )

    @classmethod
    def from_snapshot(cls, snapshot: VitalsSnapshot) -> "VitalsResponse":
        return cls(
            mem_status=snapshot.mem.status("mem"),
            mem_percent=snapshot.mem.percent,
            disk_status=snapshot.disk.status("disk"),
            disk_percent=snapshot.disk.percent,
            cpu_status=snapshot.cpu.status("cpu"),
            cpu_percent=snapshot.cpu.percent,
        )
