from dataclasses import dataclass
from environs import Env

@dataclass
class ServerConfig:
    host: str = '0.0.0.0'
    port: int = 8000

@dataclass
class DBConfig:
    """ PostgreSQL """
    host: str | None = None
    port: int | None = None
    name: str | None = None
    user: str | None = None
    password: str | None = None

    """ SQLite """
    path: str | None = None

    @property
    def url(self) -> str:
        if self.host:
            return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"
        return f"sqlite+aiosqlite:///{self.path}"

    @property
    def is_sqlite(self) -> bool:
        return not self.host

@dataclass
class LogConfig:
    level: str = 'INFO'

@dataclass
class Config:
    """ Config """
    server: ServerConfig
    db: DBConfig
    log: LogConfig

def load_config(path: str | None) -> Config:
    env = Env()
    env.read_env(path)

    return Config(
        server=ServerConfig(
            host=env('IP', '0.0.0.0'),
            port=env.int('PORT', 8000),
        ),
        db=DBConfig(
            host=env('DB_HOST', None),
            port=env.int('DB_PORT', 5432),
            name=env('DB_NAME', None),
            user=env('DB_USER', None),
            password=env('DB_PASSWORD', None),
            path=env('DB_PATH', 'data/keychat.db')
        ),
        log=LogConfig(
            level=env.str('LOG_LEVEL', 'INFO').upper()
        )
    )
