from dataclasses import dataclass, field
from environs import Env

DEFAULT_DB_PATH = "data/messagely.db"

@dataclass
class JWTConfig:
    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int | None = None

@dataclass
class DBConfig:
    """ PostgreSQL """
    host: str | None = None
    port: int | None = None
    name: str | None = None
    user: str | None = None
    password: str | None = None

    """ SQLite """
    path: str = DEFAULT_DB_PATH

    echo: bool = False

    @property
    def is_postgres(self) -> bool:
        return bool(self.host)

@dataclass
class PasswordConfig:
    schemes: list[str] = field(default_factory=lambda: ["argon2"])

@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

@dataclass
class Config:
    """ Config """
    jwt: JWTConfig
    db: DBConfig
    password: PasswordConfig = field(default_factory=PasswordConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

def load_config(path: str | None = None) -> Config:
    env = Env()
    env.read_env(path)

    return Config(
        jwt=JWTConfig(
            secret_key=env('SECRET_KEY'),
            algorithm=env('JWT_ALGORITHM', 'HS256'),
            expire_minutes=env.int('ACCESS_TOKEN_EXPIRE_MINUTES', None)
        ),
        db=DBConfig(
            host=env('DB_HOST', None),
            port=env.int('DB_PORT', None),
            name=env('DB_NAME', None),
            user=env('DB_USER', None),
            password=env('DB_PASSWORD', None),
            path=env('DB_PATH', DEFAULT_DB_PATH),
            echo=env.bool('DB_ECHO', False)
        ),
        password=PasswordConfig(
            schemes=env.list('PASSWORD_SCHEMES', ['argon2'])
        ),
        server=ServerConfig(
            host=env('HOST', '0.0.0.0'),
            port=env.int('PORT', 8000),
            log_level=env('LOG_LEVEL', 'INFO').upper()
        )
    )
