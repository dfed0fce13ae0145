from gamesync.views.account_handlers import (
    delete_account as delete_account,
)
from gamesync.views.account_handlers import (
    get_account as get_account,
)
from gamesync.views.account_handlers import (
    get_self as get_self,
)
from gamesync.views.account_handlers import (
    register as register,
)
from gamesync.views.account_handlers import (
    update_account as update_account,
)
from gamesync.views.game_handlers import (
    create_game as create_game,
)
from gamesync.views.game_handlers import (
    delete_game as delete_game,
)
from gamesync.views.game_handlers import (
    get_game as get_game,
)
from gamesync.views.game_handlers import (
    list_games as list_games,
)
from gamesync.views.game_handlers import (
    update_game as update_game,
)
