import yaml
import os
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

# 載入 .env 檔案（如果存在）
load_dotenv()

DEFAULT_TEMPLATE_PATH = os.path.join("template", "Test_case_excel_template.xlsx")


class AppConfig(BaseModel):
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 9999
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, fallback: 'AppConfig' = None) -> 'AppConfig':
        """從環境變數載入設定，如果環境變數為空則使用 fallback"""
        return cls(
            debug=os.getenv('DEBUG', str(fallback.debug).lower() if fallback else 'false').lower() == 'true',
            host=os.getenv('HOST', fallback.host if fallback else '0.0.0.0'),
            port=int(os.getenv('PORT', str(fallback.port) if fallback else '9999')),
            log_level=os.getenv('LOG_LEVEL', fallback.log_level if fallback else 'INFO').upper(),
        )


class ExportConfig(BaseModel):
    """Excel 匯出設定（樣板路徑與填入位置）"""
    enable_template: bool = True
    template_path: str = DEFAULT_TEMPLATE_PATH
    template_sheet_name: str = "Test Cases"
    # 1-based 列號，資料從此列開始寫入
    template_start_row: int = 17
    sheet_name: str = "Test Cases"

    def resolve_template_path(self, base_dir: Optional[str] = None) -> str:
        if os.path.isabs(self.template_path):
            return self.template_path
        return os.path.join(base_dir or os.getcwd(), self.template_path)

    @classmethod
    def from_env(cls, fallback: 'ExportConfig' = None) -> 'ExportConfig':
        """從環境變數載入匯出設定"""
        return cls(
            enable_template=os.getenv(
                'EXPORT_ENABLE_TEMPLATE',
                str(fallback.enable_template if fallback else True),
            ).lower() == 'true',
            template_path=os.getenv(
                'EXPORT_TEMPLATE_PATH',
                fallback.template_path if fallback else DEFAULT_TEMPLATE_PATH,
            ),
            template_sheet_name=os.getenv(
                'EXPORT_TEMPLATE_SHEET',
                fallback.template_sheet_name if fallback else 'Test Cases',
            ),
            template_start_row=int(os.getenv(
                'EXPORT_TEMPLATE_START_ROW',
                str(fallback.template_start_row if fallback else 17),
            )),
            sheet_name=fallback.sheet_name if fallback else 'Test Cases',
        )


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    export: ExportConfig = ExportConfig()

    @classmethod
    def from_env_and_file(cls, config_path: str = "config.yaml") -> 'Settings':
        """從環境變數和 YAML 檔案載入設定（環境變數優先）"""
        # 先載入檔案設定
        if os.path.exists(config_path):
            with open(config_path, 'r', encoding='utf-8') as file:
                config_data = yaml.safe_load(file) or {}
            base_settings = cls(**config_data)
        else:
            base_settings = cls()

        # 環境變數覆蓋檔案設定（僅當環境變數存在時）
        return cls(
            app=AppConfig.from_env(base_settings.app),
            export=ExportConfig.from_env(base_settings.export),
        )


def create_default_config(config_path: str = "config.yaml") -> None:
    """建立預設設定檔"""
    default_config = {
        "app": {
            "debug": False,
            "host": "0.0.0.0",
            "port": 9999,
            "log_level": "INFO",
        },
        "export": {
            "enable_template": True,
            "template_path": DEFAULT_TEMPLATE_PATH,
            "template_sheet_name": "Test Cases",
            "template_start_row": 17,
            "sheet_name": "Test Cases",
        },
    }

    with open(config_path, 'w', encoding='utf-8') as file:
        yaml.dump(default_config, file, default_flow_style=False, allow_unicode=True)


# 全域設定實例
settings = Settings.from_env_and_file()


# 方便的 getter 函式
def get_settings() -> Settings:
    """取得設定實例"""
    return settings
