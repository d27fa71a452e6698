from cargoflow.schemas.responses import CamelModel


class DashboardStats(CamelModel):
    total_products: int
    in_transit: int
    delivered: int
    active_processes: int
