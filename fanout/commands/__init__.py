from .root import (
    main as main,
    run as run,
)
