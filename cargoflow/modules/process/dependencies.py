from fastapi import Depends

from cargoflow.config import settings
from cargoflow.modules.process.state_machine import ProcessStateMachine
from cargoflow.repositories.dependencies import Stores, get_stores


def get_state_machine(stores: Stores = Depends(get_stores)) -> ProcessStateMachine:
    entities, processes = stores
    return ProcessStateMachine(
        entities, processes, strict_flow_guards=settings.strict_flow_guards
    )
