"""
Component recipes — what each component installs and writes.

Pure data. The install engine reads these dicts; nothing here is
executed. Strings may contain ``{home}``, ``{user}`` and
``{brew_prefix}`` placeholders, rendered at run time.

Recipe keys:
    description     One-line summary for ``--list``.
    formula / cask  Homebrew package name (``cask`` marks a cask).
    tap             Tap to add before installing.
    cli             Executable probed for presence and version.
    version_command Command printing the installed version.
    version_pattern Regex whose first group is the version.
    version_source  ``"cli"`` (default) or ``"brew"`` (``brew list --versions``).
    app             App bundle name under /Applications (casks).
    profile         ``{"description": ..., "content": ...}`` shell block.
    profile_if_cli_missing  Only add the profile block while ``cli`` is absent.
    config_files    ``[{"path": ..., "content": ...}]`` written if absent.
    dirs            Directories created after install.
    uninstall       ``{"patterns": [...], "files": [...], "dirs": [...]}``.
    verify_paths    Extra paths ``verify`` expects to exist.
"""

from __future__ import annotations

# ── Homebrew ────────────────────────────────────────────────────

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

HOMEBREW_MIRRORS: dict[str, str] = {
    "brew": "https://mirrors.tuna.tsinghua.edu.cn/git/homebrew/brew.git",
    "core": "https://mirrors.tuna.tsinghua.edu.cn/git/homebrew/homebrew-core.git",
    "bottles": "https://mirrors.tuna.tsinghua.edu.cn/homebrew-bottles",
}

# ── Git ─────────────────────────────────────────────────────────

GIT_GLOBAL_SETTINGS: list[tuple[str, str]] = [
    ("http.postBuffer", "1048576000"),
    ("http.maxRequestBuffer", "100M"),
    ("core.preloadindex", "true"),
    ("core.fscache", "true"),
    ("gc.auto", "256"),
]

# ── iTerm2 / Oh My Zsh ──────────────────────────────────────────

OH_MY_ZSH_INSTALL_URL = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"

ZSH_PLUGINS: dict[str, str] = {
    "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
    "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions.git",
}

ZSH_PLUGINS_LINE = (
    "plugins=(git brew node npm python golang rust docker kubectl "
    "zsh-syntax-highlighting zsh-autosuggestions)"
)

ZSHRC_BLOCK_DESCRIPTION = "Custom iTerm2 + Oh My Zsh configuration"
ZSHRC_BLOCK = """\
DEFAULT_USER="$(whoami)"

# Development aliases
alias ll='ls -alF'
alias la='ls -A'
alias l='ls -CF'
alias grep='grep --color=auto'

# Git aliases
alias gst='git status'
alias gco='git checkout'
alias gcm='git commit -m'
alias gps='git push'
alias gpl='git pull'"""

# ── Python / Node.js ────────────────────────────────────────────

PIP_BOOTSTRAP_PACKAGES = ["pip", "setuptools", "wheel"]

NPM_GLOBAL_DIR = "{home}/.npm-global"
NPM_SETTINGS: list[tuple[str, str]] = [
    ("prefix", NPM_GLOBAL_DIR),
    ("registry", "https://registry.npmmirror.com"),
]

# ── Payloads ────────────────────────────────────────────────────

PIP_CONF = """\
[global]
index-url = https://pypi.tuna.tsinghua.edu.cn/simple
trusted-host = pypi.tuna.tsinghua.edu.cn
"""

CARGO_CONFIG = """\
[source.crates-io]
replace-with = 'tuna'

[source.tuna]
registry = "sparse+https://mirrors.tuna.tsinghua.edu.cn/crates.io-index/"

[net]
git-fetch-with-cli = true
"""

SING_BOX_CONFIG = """\
{
  "log": {
    "level": "info",
    "timestamp": true
  },
  "inbounds": [
    {
      "type": "mixed",
      "listen": "::",
      "listen_port": 2080
    }
  ],
  "outbounds": [
    {
      "type": "direct",
      "tag": "direct"
    }
  ]
}
"""

# ── Recipes (registry order lives in engine.registry) ───────────

COMPONENT_RECIPES: dict[str, dict] = {
    "homebrew": {
        "description": "Homebrew package manager with China mirrors",
        "cli": "brew",
        "version_command": ["brew", "--version"],
        "version_pattern": r"Homebrew\s+(\d+\.\d+\.\d+)",
        "profile": {
            "description": "Homebrew Environment",
            "content": (
                'export PATH="/opt/homebrew/bin:/usr/local/bin:$PATH"\n'
                f"export HOMEBREW_BOTTLE_DOMAIN={HOMEBREW_MIRRORS['bottles']}\n"
                f"export HOMEBREW_BREW_GIT_REMOTE={HOMEBREW_MIRRORS['brew']}\n"
                f"export HOMEBREW_CORE_GIT_REMOTE={HOMEBREW_MIRRORS['core']}"
            ),
        },
    },
    "git": {
        "description": "Git (Homebrew build) with network tuning",
        "formula": "git",
        "cli": "git",
        "version_command": ["git", "--version"],
        "version_pattern": r"git version\s+(\d+\.\d+\.\d+)",
        "profile": {
            "description": "Git environment",
            "content": 'export PATH="/usr/local/bin:$PATH"',
        },
    },
    "iterm2": {
        "description": "iTerm2 terminal with Oh My Zsh and plugins",
        "cask": "iterm2",
        "app": "iTerm",
        "verify_paths": ["{home}/.oh-my-zsh"],
    },
    "go": {
        "description": "Go toolchain with goproxy.cn",
        "formula": "go",
        "cli": "go",
        "version_command": ["go", "version"],
        "version_pattern": r"go(\d+\.\d+(?:\.\d+)?)",
        "profile": {
            "description": "Go environment",
            "content": (
                "export GOPATH=$HOME/go\n"
                "export PATH=$PATH:$GOPATH/bin\n"
                "export GOPROXY=https://goproxy.cn,direct\n"
                "export GOSUMDB=sum.golang.google.cn"
            ),
        },
        "dirs": ["{home}/go/src", "{home}/go/bin", "{home}/go/pkg"],
    },
    "python": {
        "description": "Python 3 with the TUNA PyPI mirror",
        "formula": "python@3",
        "cli": "python3",
        "version_command": ["python3", "--version"],
        "version_pattern": r"Python\s+(\d+\.\d+\.\d+)",
        "profile": {
            "description": "Python environment",
            "content": (
                'export PATH="/usr/local/opt/python@3/bin:$PATH"\n'
                "alias python=python3\n"
                "alias pip=pip3"
            ),
        },
        "config_files": [
            {"path": "{home}/.pip/pip.conf", "content": PIP_CONF},
        ],
        "uninstall": {
            "keep_package": True,
            "patterns": ["Python environment", "opt/python@3/bin", "python3", "pip3"],
            "files": ["{home}/.pip/pip.conf"],
        },
    },
    "java": {
        "description": "OpenJDK with JAVA_HOME",
        "formula": "openjdk",
        "cli": "java",
        "version_source": "brew",
        "profile": {
            "description": "Java environment",
            "content": (
                "export JAVA_HOME={brew_prefix}/opt/openjdk/libexec/openjdk.jdk/Contents/Home\n"
                "export PATH=$JAVA_HOME/bin:$PATH"
            ),
        },
        "uninstall": {
            "patterns": ["Java environment", "JAVA_HOME"],
        },
    },
    "rust": {
        "description": "Rust toolchain with the TUNA crates mirror",
        "formula": "rust",
        "cli": "rustc",
        "version_command": ["rustc", "--version"],
        "version_pattern": r"rustc\s+(\d+\.\d+\.\d+)",
        "profile": {
            "description": "Rust environment",
            "content": (
                'export CARGO_HOME="$HOME/.cargo"\n'
                'export PATH="$CARGO_HOME/bin:$PATH"'
            ),
        },
        "config_files": [
            {"path": "{home}/.cargo/config.toml", "content": CARGO_CONFIG},
        ],
        "uninstall": {
            "patterns": ["Rust environment", "CARGO_HOME"],
            "files": ["{home}/.cargo/config.toml"],
        },
    },
    "nodejs": {
        "description": "Node.js and npm with the npmmirror registry",
        "formula": "node",
        "cli": "node",
        "version_command": ["node", "--version"],
        "version_pattern": r"v(\d+\.\d+\.\d+)",
        "profile": {
            "description": "Node.js and npm environment",
            "content": 'export PATH="$HOME/.npm-global/bin:$PATH"',
        },
        "uninstall": {
            "patterns": ["Node.js and npm environment", ".npm-global"],
            "dirs": [NPM_GLOBAL_DIR, "{home}/.npm"],
        },
    },
    "singbox": {
        "description": "sing-box proxy with a starter config",
        "formula": "sing-box",
        "tap": "sagernet/sing-box",
        "cli": "sing-box",
        "version_command": ["sing-box", "version"],
        "version_pattern": r"sing-box version\s+(\d+\.\d+\.\d+)",
        "config_files": [
            {"path": "{home}/.config/sing-box/config.json", "content": SING_BOX_CONFIG},
        ],
        "uninstall": {
            "dirs": ["{home}/.config/sing-box"],
        },
    },
    "vscode": {
        "description": "Visual Studio Code and its 'code' command",
        "cask": "visual-studio-code",
        "app": "Visual Studio Code",
        "cli": "code",
        "profile_if_cli_missing": True,
        "profile": {
            "description": "VS Code command line",
            "content": (
                'export PATH="$PATH:/Applications/Visual Studio Code.app/Contents/Resources/app/bin"'
            ),
        },
        "uninstall": {
            "patterns": ["VS Code command line", "Visual Studio Code.app/Contents/Resources/app/bin"],
        },
    },
}
