"""
Static catalog of starter project files.

build_template_set() maps a framework/language pair to the files committed
into the new repository. Output depends only on its arguments.
"""
import json
from typing import Dict

from models import Framework, Language, Selection

TemplateSet = Dict[str, str]

FRAMEWORK_OPTIONS = [
    {
        "id": Framework.VITE.value,
        "name": "Vite",
        "description": "Lightning fast build tool with instant server start"
    },
    {
        "id": Framework.NEXTJS.value,
        "name": "Next.js",
        "description": "The React framework for production-grade applications"
    },
    {
        "id": Framework.CRA.value,
        "name": "Create React App",
        "description": "Traditional React tooling with zero configuration"
    }
]

LANGUAGE_OPTIONS = [
    {
        "id": Language.TYPESCRIPT.value,
        "name": "TypeScript",
        "description": "Static typing for scalable applications"
    },
    {
        "id": Language.JAVASCRIPT.value,
        "name": "JavaScript",
        "description": "Dynamic and flexible development"
    }
]

LANGUAGE_LABELS = {
    Language.TYPESCRIPT: "TypeScript",
    Language.JAVASCRIPT: "JavaScript",
}


def repository_name(selection: Selection) -> str:
    return f"{selection.framework.value}-{selection.language.value}-project"


def repository_description(selection: Selection) -> str:
    return f"A {selection.framework.value} project with {selection.language.value}"


def build_template_set(framework: Framework, language: Language) -> TemplateSet:
    """
    Build the files for a new starter repository

    Args:
        framework: Frontend framework of the project
        language: Language label used inside the generated sources

    Returns:
        Mapping of repository-relative path to file content
    """
    files = {
        "README.md": _readme(framework, language),
        ".gitignore": GITIGNORE,
    }

    if framework is Framework.VITE:
        files["package.json"] = _to_json(VITE_PACKAGE_JSON)
        files["vite.config.ts"] = VITE_CONFIG
        files["tsconfig.json"] = _to_json(TSCONFIG)
        files["src/main.tsx"] = VITE_MAIN
        files["src/App.tsx"] = _app_component("Vite + React", language)
        files["src/index.css"] = INDEX_CSS
    elif framework is Framework.NEXTJS:
        files["package.json"] = _to_json(NEXTJS_PACKAGE_JSON)
        files["next.config.js"] = NEXTJS_CONFIG
        files["tsconfig.json"] = _to_json(TSCONFIG)
        files["src/app/page.tsx"] = NEXTJS_PAGE
        files["src/app/layout.tsx"] = NEXTJS_LAYOUT
        files["src/app/globals.css"] = INDEX_CSS
    elif framework is Framework.CRA:
        files["package.json"] = _to_json(CRA_PACKAGE_JSON)
        files["src/index.tsx"] = CRA_MAIN
        files["src/App.tsx"] = _app_component("Create React App", language)
        files["src/index.css"] = INDEX_CSS

    return files


def _to_json(data: dict) -> str:
    return json.dumps(data, indent=2)


def _readme(framework: Framework, language: Language) -> str:
    project = f"{framework.value}-{language.value}-project"
    return f"""# {project}

This project was generated using the Frontend Starter Generator.

## Getting Started

### Prerequisites

- Node.js 18.x or later
- npm 9.x or later

### Installation

1. Clone the repository:
```bash
git clone https://github.com/yourusername/{project}.git
cd {project}
```

2. Install dependencies:
```bash
npm install
```

3. Start the development server:
```bash
npm run dev
```

## Available Scripts

- `npm run dev` - Start development server
- `npm run build` - Build for production
- `npm run preview` - Preview production build
"""


def _app_component(title: str, language: Language) -> str:
    return f"""import React from 'react';

const App: React.FC = () => {{
  return (
    <div className="min-h-screen bg-gray-100">
      <div className="container px-4 py-8 mx-auto">
        <h1 className="text-4xl font-bold text-gray-900">
          Welcome to {title} + {LANGUAGE_LABELS[language]}
        </h1>
      </div>
    </div>
  );
}};

export default App;"""


GITIGNORE = """# Dependencies
node_modules
.pnp
.pnp.js

# Testing
coverage
*.lcov

# Production
dist
build
out

# Environment files
.env
.env.local
.env.development.local
.env.test.local
.env.production.local

# Logs
logs
*.log
npm-debug.log*
yarn-debug.log*
yarn-error.log*
pnpm-debug.log*
lerna-debug.log*

# Editor directories and files
.vscode/*
!.vscode/extensions.json
!.vscode/settings.json
!.vscode/launch.json
.idea
.DS_Store
*.suo
*.ntvs*
*.njsproj
*.sln
*.sw?
*.swp
*.swo
.project
.classpath
.settings/
*.sublime-workspace
*.sublime-project

# TypeScript cache
*.tsbuildinfo

# Optional npm cache directory
.npm

# Optional eslint cache
.eslintcache

# Optional stylelint cache
.stylelintcache

# Yarn Integrity file
.yarn-integrity

# Vite
vite.config.ts.timestamp-*"""

INDEX_CSS = """@tailwind base;
@tailwind components;
@tailwind utilities;"""

TSCONFIG = {
    "compilerOptions": {
        "target": "ES2020",
        "useDefineForClassFields": True,
        "lib": ["ES2020", "DOM", "DOM.Iterable"],
        "module": "ESNext",
        "skipLibCheck": True,
        "moduleResolution": "bundler",
        "allowImportingTsExtensions": True,
        "resolveJsonModule": True,
        "isolatedModules": True,
        "noEmit": True,
        "jsx": "react-jsx",
        "strict": True,
        "noUnusedLocals": True,
        "noUnusedParameters": True,
        "noFallthroughCasesInSwitch": True,
        "baseUrl": ".",
        "paths": {
            "@/*": ["src/*"]
        }
    },
    "include": ["src"],
    "references": [{"path": "./tsconfig.node.json"}]
}

# Vite
VITE_PACKAGE_JSON = {
    "name": "vite-project",
    "private": True,
    "version": "0.1.0",
    "type": "module",
    "scripts": {
        "dev": "vite",
        "build": "tsc && vite build",
        "lint": "eslint . --ext ts,tsx --report-unused-disable-directives --max-warnings 0",
        "preview": "vite preview"
    },
    "dependencies": {
        "react": "^18.2.0",
        "react-dom": "^18.2.0"
    },
    "devDependencies": {
        "@types/react": "^18.2.64",
        "@types/react-dom": "^18.2.21",
        "@typescript-eslint/eslint-plugin": "^7.1.1",
        "@typescript-eslint/parser": "^7.1.1",
        "@vitejs/plugin-react": "^4.2.1",
        "autoprefixer": "^10.4.18",
        "eslint": "^8.57.0",
        "eslint-plugin-react-hooks": "^4.6.0",
        "eslint-plugin-react-refresh": "^0.4.5",
        "postcss": "^8.4.35",
        "tailwindcss": "^3.4.1",
        "typescript": "^5.2.2",
        "vite": "^5.1.6"
    }
}

VITE_CONFIG = """import { defineConfig } from 'vite';
import react from '@vitejs/plugin-react';
import path from 'path';

export default defineConfig({
  plugins: [react()],
  resolve: {
    alias: {
      '@': path.resolve(__dirname, './src'),
    },
  },
});"""

VITE_MAIN = """import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';
import './index.css';

ReactDOM.createRoot(document.getElementById('root')!).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);"""

# Next.js
NEXTJS_PACKAGE_JSON = {
    "name": "nextjs-project",
    "version": "0.1.0",
    "private": True,
    "scripts": {
        "dev": "next dev",
        "build": "next build",
        "start": "next start",
        "lint": "next lint"
    },
    "dependencies": {
        "next": "14.1.0",
        "react": "^18.2.0",
        "react-dom": "^18.2.0"
    },
    "devDependencies": {
        "@types/node": "^20.11.28",
        "@types/react": "^18.2.64",
        "@types/react-dom": "^18.2.21",
        "autoprefixer": "^10.4.18",
        "eslint": "^8.57.0",
        "eslint-config-next": "14.1.0",
        "postcss": "^8.4.35",
        "tailwindcss": "^3.4.1",
        "typescript": "^5.2.2"
    }
}

NEXTJS_CONFIG = """/** @type {import('next').NextConfig} */
const nextConfig = {
  reactStrictMode: true,
};

module.exports = nextConfig;"""

NEXTJS_PAGE = """export default function Home() {
  return (
    <main className="flex flex-col items-center justify-between min-h-screen p-24">
      <h1 className="text-4xl font-bold">Welcome to Next.js</h1>
    </main>
  );
}"""

NEXTJS_LAYOUT = """import './globals.css';
import type { Metadata } from 'next';

export const metadata: Metadata = {
  title: 'Next.js App',
  description: 'Generated with Frontend Starter Generator',
};

export default function RootLayout({
  children,
}: {
  children: React.ReactNode;
}) {
  return (
    <html lang="en">
      <body>{children}</body>
    </html>
  );
}"""

# Create React App
CRA_PACKAGE_JSON = {
    "name": "cra-project",
    "version": "0.1.0",
    "private": True,
    "dependencies": {
        "@testing-library/jest-dom": "^5.17.0",
        "@testing-library/react": "^13.4.0",
        "@testing-library/user-event": "^13.5.0",
        "react": "^18.2.0",
        "react-dom": "^18.2.0",
        "react-scripts": "5.0.1",
        "web-vitals": "^2.1.4"
    },
    "scripts": {
        "start": "react-scripts start",
        "build": "react-scripts build",
        "test": "react-scripts test",
        "eject": "react-scripts eject"
    },
    "devDependencies": {
        "@types/jest": "^27.5.2",
        "@types/node": "^20.11.28",
        "@types/react": "^18.2.64",
        "@types/react-dom": "^18.2.21",
        "autoprefixer": "^10.4.18",
        "postcss": "^8.4.35",
        "tailwindcss": "^3.4.1",
        "typescript": "^5.2.2"
    },
    "eslintConfig": {
        "extends": [
            "react-app",
            "react-app/jest"
        ]
    },
    "browserslist": {
        "production": [
            ">0.2%",
            "not dead",
            "not op_mini all"
        ],
        "development": [
            "last 1 chrome version",
            "last 1 firefox version",
            "last 1 safari version"
        ]
    }
}

CRA_MAIN = """import React from 'react';
import ReactDOM from 'react-dom/client';
import './index.css';
import App from './App';

const root = ReactDOM.createRoot(
  document.getElementById('root') as HTMLElement
);
root.render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);"""
